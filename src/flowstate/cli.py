"""Flowstate CLI - personal to-do lists with reminders."""

import json
import logging
import sys

import click

from .adapters import BannerChannel, JsonFileStore, TelegramChannel
from .config import Config, load_config
from .core.filters import TaskDisplay, build_view
from .core.state import FilterMode
from .core.tasks import DueStatus
from .reminders import Notifier, ReminderEvaluator
from .repository import PersistenceError, TaskRepository
from .theme import load_theme, toggle_theme

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PALETTES = {
    "dark": {"overdue": "bright_red", "due-today": "bright_yellow", "badge": "bright_cyan", "muted": "bright_black"},
    "light": {"overdue": "red", "due-today": "yellow", "badge": "blue", "muted": "white"},
}


def _store(config: Config) -> JsonFileStore:
    return JsonFileStore(config.data_path)


def _repository(config: Config) -> TaskRepository:
    return TaskRepository.load(_store(config), fallback_list=config.default_list)


def _notifier(config: Config) -> Notifier:
    system = None
    if config.notifications == "auto":
        system = TelegramChannel(config.telegram_bot_token, config.telegram_chat_ids)
    return Notifier(system, BannerChannel())


def _abort(message) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Flowstate - to-do lists with due-date reminders."""
    if debug:
        logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG)


# ============== Tasks ==============


@main.command()
@click.argument("title")
@click.option("--list", "-l", "list_name", default=None, help="List to add to (default: current list)")
@click.option("--due", "-d", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Due date (YYYY-MM-DD)")
def add(title: str, list_name: str | None, due):
    """Add a task."""
    repo = _repository(load_config())
    try:
        task = repo.add_task(title, list_name=list_name, due_date=due.date() if due else None)
    except PersistenceError as e:
        _abort(e)

    if task is None:
        if list_name and list_name not in repo.state.lists:
            _abort(f'No list named "{list_name}".')
        _abort("Task title cannot be empty.")
    click.echo(f"Added {task.id} to {task.list}: {task.title}")


@main.command()
@click.argument("parent_id", type=int)
@click.argument("title")
def sub(parent_id: int, title: str):
    """Add a subtask under PARENT_ID."""
    repo = _repository(load_config())
    try:
        subtask = repo.add_subtask(parent_id, title)
    except PersistenceError as e:
        _abort(e)

    if subtask is None:
        _abort(f"Cannot add subtask to {parent_id} (unknown task or empty title).")
    click.echo(f"Added subtask {subtask.id}: {subtask.title}")


@main.command()
@click.argument("item_id", type=int)
def toggle(item_id: int):
    """Mark a task or subtask done (or not done)."""
    repo = _repository(load_config())
    try:
        toggled = repo.toggle_task(item_id)
    except PersistenceError as e:
        _abort(e)

    if not toggled:
        _abort(f"Task id {item_id} not found.")
    item = repo.find(item_id)
    click.echo(f"{'✓' if item.completed else '○'} {item.title}")


@main.command()
@click.argument("item_id", type=int)
def rm(item_id: int):
    """Delete a task or subtask."""
    repo = _repository(load_config())
    try:
        deleted = repo.delete_task(item_id)
    except PersistenceError as e:
        _abort(e)

    if not deleted:
        _abort(f"Task id {item_id} not found.")
    click.echo(f"Deleted {item_id}.")


def _item_to_json(item: TaskDisplay) -> dict:
    return {
        "id": item.id,
        "title": item.title,
        "completed": item.completed,
        "status": item.status_class or None,
        "due": item.due_label,
        "list": item.list_badge,
        "subtasks": [_item_to_json(s) for s in item.subtasks],
    }


def _show_item(item: TaskDisplay, palette: dict, indent: str = "") -> None:
    check = "[x]" if item.completed else "[ ]"
    title_style = {"fg": palette["muted"]} if item.completed else {"bold": not indent}
    line = f"{indent}{check} " + click.style(str(item.id), fg=palette["muted"]) + " "
    line += click.style(item.title, **title_style)
    if item.list_badge:
        line += " " + click.style(f"#{item.list_badge}", fg=palette["badge"])
    if item.due_label:
        color = palette.get(item.status_class) if item.due_status != DueStatus.COMPLETED else palette["muted"]
        line += " " + click.style(f"({item.due_label})", fg=color)
    click.echo(line)
    for child in item.subtasks:
        _show_item(child, palette, indent + "    ")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def ls(as_json: bool):
    """Show tasks in the current view."""
    config = load_config()
    repo = _repository(config)
    view = build_view(repo.state, config.today())

    if as_json:
        click.echo(
            json.dumps(
                {
                    "title": view.title,
                    "filter": repo.state.filter.value,
                    "tasks": [_item_to_json(i) for i in view.items],
                },
                indent=2,
            )
        )
        return

    palette = PALETTES[load_theme(_store(config))]
    click.secho(f"### {view.title}", bold=True)
    if not view.items:
        click.echo(view.empty_message)
        return
    for item in view.items:
        _show_item(item, palette)


# ============== Lists & views ==============


@main.command()
def lists():
    """Show all lists."""
    repo = _repository(load_config())
    state = repo.state
    if not state.lists:
        click.echo("No lists.")
        return
    for name in state.lists:
        marker = "*" if name == state.active_list else " "
        click.echo(f"{marker} {name} ({len(state.tasks_in_list(name))})")


@main.command("new-list")
@click.argument("name")
def new_list(name: str):
    """Create a list and switch to it."""
    repo = _repository(load_config())
    try:
        created = repo.create_list(name)
    except PersistenceError as e:
        _abort(e)

    if not created:
        if name.strip():
            _abort("List already exists!")
        _abort("List name cannot be empty.")
    click.echo(f"Created list {name.strip()}.")


@main.command("drop-list")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def drop_list(name: str, yes: bool):
    """Delete a list and all its tasks."""
    repo = _repository(load_config())
    if name not in repo.state.lists:
        _abort(f'No list named "{name}".')
    if not yes and not click.confirm(f'Delete list "{name}" and all its tasks?'):
        return

    try:
        repo.delete_list(name)
    except PersistenceError as e:
        _abort(e)
    click.echo(f"Deleted list {name}.")


@main.command()
@click.argument("name")
def use(name: str):
    """Switch the view to a single list."""
    repo = _repository(load_config())
    try:
        switched = repo.switch_list(name)
    except PersistenceError as e:
        _abort(e)

    if not switched:
        _abort(f'No list named "{name}".')
    click.echo(f"Now showing {name}.")


@main.command()
@click.argument("mode", type=click.Choice([m.value for m in FilterMode]))
def show(mode: str):
    """Switch to a global view of all, active or completed tasks."""
    repo = _repository(load_config())
    try:
        repo.set_global_filter(FilterMode(mode))
    except PersistenceError as e:
        _abort(e)
    click.echo(f"Now showing {mode} tasks across all lists.")


# ============== Reminders ==============


@main.command()
def remind():
    """Send reminders for tasks due today or overdue."""
    config = load_config()
    notifier = _notifier(config)
    notifier.prepare()

    events = ReminderEvaluator(_repository(config), notifier).run(as_of=config.today())
    if not events:
        click.echo("Nothing due.")
        return
    click.echo(f"Sent {len(events)} reminder(s).")


@main.command()
def watch():
    """Check reminders now and then periodically until stopped."""
    logging.basicConfig(format=LOG_FORMAT, level=logging.INFO)
    from .scheduler import setup_scheduler

    config = load_config()
    notifier = _notifier(config)
    notifier.prepare()

    scheduler = setup_scheduler(_store(config), notifier, config)
    click.echo(f"Watching for due tasks every {config.reminder_interval_minutes} minute(s).")
    click.echo("Press Ctrl+C to stop")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        click.echo("\nStopped.")


# ============== Preferences ==============


@main.command()
@click.option("--toggle", "do_toggle", is_flag=True, help="Switch between dark and light")
def theme(do_toggle: bool):
    """Show or toggle the colour theme."""
    store = _store(load_config())
    if do_toggle:
        try:
            current = toggle_theme(store)
        except OSError as e:
            _abort(f"Could not save theme: {e}")
    else:
        current = load_theme(store)
    click.echo(f"Theme: {current}")


if __name__ == "__main__":
    main()
