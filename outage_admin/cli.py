"""
Admin CLI for inspecting and preparing scheduled outages.

Outages are read from a JSON file holding a list of outage records (or an
object with an "outages" list). Commands that change an outage print the
result as JSON instead of writing it back.
"""

import json
import logging
import sys
from typing import Any, NoReturn

import click

from outage_common.clock import current_time
from outage_common.directory import StaticDirectory
from outage_common.exceptions import OutageError
from outage_common.formatting import Formatter
from outage_common.models import Outage, create_default_outage, validate_time
from outage_notify import LoggingNotifier, build_notifications, dispatch

from .config import LOG_LEVELS, get_defaults, get_formatter, get_log_level

logger = logging.getLogger(__name__)

at_option = click.option(
    "--at",
    "at",
    type=int,
    default=None,
    help="Reference unix timestamp (default: now)",
)


def fail(message: str) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def read_json(path: str) -> Any:
    """Read a JSON file, exiting with an error if it is missing or invalid."""
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        fail(f"File not found: {path}")
    except json.JSONDecodeError as e:
        fail(f"Invalid JSON in {path}: {e}")
    except (OSError, UnicodeDecodeError) as e:
        fail(f"Cannot read {path}: {e}")


def load_outages(path: str) -> list[Outage]:
    """Load outages from a JSON file."""
    data = read_json(path)
    if isinstance(data, dict):
        data = data.get("outages")
    if not isinstance(data, list):
        fail(f"{path} must contain a list of outages")

    try:
        outages = [Outage.from_dict(record) for record in data]
    except OutageError as e:
        fail(str(e))
    logger.debug(f"Loaded {len(outages)} outages from {path}")
    return outages


def get_outage(path: str, outage_id: int) -> Outage:
    """Load a single outage by id."""
    for outage in load_outages(path):
        if outage.id == outage_id:
            return outage
    fail(f"Outage not found: {outage_id}")


def load_directory(path: str) -> StaticDirectory:
    """Load a user directory from a JSON list of user records."""
    data = read_json(path)
    if not isinstance(data, list):
        fail(f"{path} must contain a list of users")
    try:
        return StaticDirectory.from_records(data)
    except (KeyError, TypeError, ValueError) as e:
        fail(f"Invalid user record in {path}: {e}")


def resolve_time(at: int | None) -> int:
    """Use the given reference time, or the wall clock if none was given."""
    if at is None:
        return current_time()
    try:
        return validate_time(at)
    except OutageError as e:
        fail(str(e))


def outage_summary(outage: Outage, time: int, formatter: Formatter) -> dict[str, Any]:
    """Describe an outage at a reference time (for JSON output)."""
    return {
        "id": outage.id,
        "stage": outage.get_stage(time).value,
        "title": outage.get_title(formatter),
        "active": outage.is_active(time),
        "ongoing": outage.is_ongoing(time),
        "ended": outage.has_ended(time),
        "duration_planned": outage.duration_planned(),
        "duration_actual": outage.duration_actual(),
        "warning_duration": outage.warning_duration(),
    }


def echo_outage_json(outage: Outage) -> None:
    click.echo(json.dumps(outage.to_dict(), indent=2))


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: OUTAGE_LOG_LEVEL env or WARNING)",
)
def cli(log_level: str | None):
    """Outage Admin - Inspect and prepare scheduled outages."""
    level = (log_level or get_log_level()).upper()
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command("status")
@click.argument("outages_file")
@at_option
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def status(outages_file: str, at: int | None, json_output: bool):
    """Show the stage of every outage."""
    outages = load_outages(outages_file)
    time = resolve_time(at)

    try:
        formatter = get_formatter()
        rows = [outage_summary(o, time, formatter) for o in outages]
    except OutageError as e:
        fail(str(e))

    if json_output:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("No outages found.")
        return

    click.echo(f"\n{'ID':<8} {'Stage':<10} {'Title'}")
    click.echo("-" * 80)
    for row in rows:
        outage_id = "-" if row["id"] is None else row["id"]
        click.echo(f"{outage_id:<8} {row['stage']:<10} {row['title']}")
    click.echo()


@cli.command("show")
@click.argument("outages_file")
@click.argument("outage_id", type=int)
@at_option
def show(outages_file: str, outage_id: int, at: int | None):
    """Show details of a single outage."""
    outage = get_outage(outages_file, outage_id)
    time = resolve_time(at)

    try:
        formatter = get_formatter()
        stage = outage.get_stage(time)
        title = outage.get_title(formatter)
        description = outage.get_description(formatter)
        actual = outage.duration_actual()

        click.echo("\nOutage Details:")
        click.echo(f"  ID:          {outage.id}")
        click.echo(f"  Stage:       {stage.value}")
        click.echo(f"  Title:       {title}")
        click.echo(f"  Warning:     {formatter.format_datetime(outage.warntime)}")
        click.echo(f"  Start:       {formatter.format_datetime(outage.starttime)}")
        click.echo(f"  Stop:        {formatter.format_datetime(outage.stoptime)}")
        click.echo(f"  Planned:     {formatter.format_duration(outage.duration_planned())}")
        if actual is not None:
            click.echo(f"  Finished:    {formatter.format_datetime(outage.finished)}")
            click.echo(f"  Actual:      {formatter.format_duration(actual)}")
        click.echo(f"  Autostart:   {'Yes' if outage.autostart else 'No'}")
        click.echo(f"\n{description}\n")
    except OutageError as e:
        fail(str(e))


@cli.command("new")
@at_option
def new(at: int | None):
    """Print a new outage pre-filled from the configured defaults."""
    time = resolve_time(at)
    echo_outage_json(create_default_outage(get_defaults(), time))


@cli.command("clone")
@click.argument("outages_file")
@click.argument("outage_id", type=int)
def clone(outages_file: str, outage_id: int):
    """Print a copy of an outage without its id."""
    echo_outage_json(get_outage(outages_file, outage_id).clone())


@cli.command("finish")
@click.argument("outages_file")
@click.argument("outage_id", type=int)
@at_option
def finish(outages_file: str, outage_id: int, at: int | None):
    """Mark an ongoing outage as finished and print it."""
    outage = get_outage(outages_file, outage_id)
    time = resolve_time(at)

    try:
        outage.finish(time)
    except OutageError as e:
        fail(str(e))

    logger.info(f"Outage {outage_id} marked as finished at {time}")
    echo_outage_json(outage)


@cli.command("notify")
@click.argument("outages_file")
@click.argument("outage_id", type=int)
@click.option(
    "--directory", "directory_file", required=True, help="JSON file with user records"
)
@click.option("--admins", is_flag=True, help="Print the site admin emails instead")
def notify(outages_file: str, outage_id: int, directory_file: str, admins: bool):
    """Render notifications for an outage's mailing list."""
    outage = get_outage(outages_file, outage_id)
    directory = load_directory(directory_file)

    if admins:
        click.echo(outage.get_siteadmin_emails(directory))
        return

    try:
        notifications = build_notifications(outage, directory, get_formatter())
    except OutageError as e:
        fail(str(e))

    if not notifications:
        click.echo("No recipients found.")
        return

    notifier = LoggingNotifier()
    sent = dispatch(notifications, notifier)
    for notification in notifier.sent:
        click.echo(f"  {notification.recipient.email}: {notification.subject}")
    click.echo(f"✓ Notified {sent} recipient(s)")


def main() -> None:
    cli()
