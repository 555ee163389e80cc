"""Flowstate - personal to-do lists with due-date reminders."""
