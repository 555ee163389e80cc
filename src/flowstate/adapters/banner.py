"""In-terminal banner notification adapter."""

import click


class BannerChannel:
    """
    Prints reminders as a highlighted banner on stderr.

    Implements NotificationChannel protocol. Always available, so it serves
    as the fallback when system notifications are not granted.
    """

    def __init__(self, color: str = "yellow"):
        self.color = color

    def request_permission(self) -> None:
        return None

    def is_granted(self) -> bool:
        return True

    def show(self, title: str, body: str) -> None:
        click.secho(f"⏰ {title} ", fg=self.color, bold=True, err=True, nl=False)
        click.echo(body, err=True)
