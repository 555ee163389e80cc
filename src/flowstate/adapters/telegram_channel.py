"""Telegram notification adapter - pushes reminders to a phone."""

import asyncio
import logging

import telegramify_markdown
from telegram import Bot
from telegram.error import TelegramError

logger = logging.getLogger(__name__)

MESSAGE_LIMIT = 4000


async def send_markdown(bot: Bot, text: str, *, chat_id: int) -> None:
    """Send markdown text to a chat, converting to MarkdownV2."""
    converted = telegramify_markdown.markdownify(text)
    chunks = [converted[i : i + MESSAGE_LIMIT] for i in range(0, len(converted), MESSAGE_LIMIT)]
    for chunk in chunks:
        await bot.send_message(chat_id=chat_id, text=chunk, parse_mode="MarkdownV2")


class TelegramChannel:
    """
    Telegram bot notifications.

    Implements NotificationChannel protocol. "Permission" is granted once a
    bot token and at least one chat id are configured.
    """

    def __init__(self, token: str, chat_ids: list[int]):
        self.token = token
        self.chat_ids = chat_ids

    def request_permission(self) -> None:
        """Log what is missing; there is no interactive grant for a bot."""
        if not self.token:
            logger.info("Telegram notifications off: TELEGRAM_BOT_TOKEN not configured")
        elif not self.chat_ids:
            logger.warning(
                "TELEGRAM_BOT_TOKEN set but TELEGRAM_CHAT_IDS is empty. "
                "Message your bot, then add your chat id to flowstate.conf"
            )

    def is_granted(self) -> bool:
        return bool(self.token and self.chat_ids)

    def show(self, title: str, body: str) -> None:
        """Send the notification to every configured chat."""
        sent = asyncio.run(self._send(f"**{title}**\n\n{body}"))
        if not sent:
            raise RuntimeError(f"Telegram notification not delivered to any of {self.chat_ids}")

    async def _send(self, text: str) -> int:
        sent = 0
        async with Bot(self.token) as bot:
            for chat_id in self.chat_ids:
                try:
                    await send_markdown(bot, text, chat_id=chat_id)
                    sent += 1
                except TelegramError as e:
                    logger.error(f"Failed to send reminder to chat {chat_id}: {e}")
        return sent
