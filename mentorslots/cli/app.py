"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_rule_source import JsonRuleSource
from ..adapters.rest_rule_source import RestRuleSource
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import MentorSlotsError
from ..domain.expander import RecurrenceExpander
from ..domain.slot_views import group_by_day, split_into_sessions, week_window
from ..services.availability import AvailabilityService, RuleSourceProtocol

app = typer.Typer(
    name="mentorslots",
    help="Expand mentor availability rules into bookable slots",
    add_completion=False
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show log output.")] = False,
):
    """
    Mentor availability tools.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the YAML config, falling back to defaults when none exists."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    return AppConfig()


def _build_rule_source(config: AppConfig, rules_file: Optional[Path]) -> RuleSourceProtocol:
    """
    Pick the rule source: an explicit file, the configured file, or storage.
    """
    if rules_file is not None:
        return JsonRuleSource(rules_file)

    if config.rules_file is not None:
        return JsonRuleSource(config.rules_file)

    if config.storage is not None:
        return RestRuleSource(
            base_url=config.storage.url,
            api_key=config.storage.api_key,
            table=config.storage.table,
            timeout=config.storage.timeout_seconds,
        )

    raise MentorSlotsError(
        "No availability source configured. Pass --file or set rules_file/storage in config.yaml."
    )


def _determine_window(
    *,
    tz: str,
    week_starts_on: int,
    this_week: bool,
    next_week: bool,
    start_option: Optional[str],
    end_option: Optional[str]
):
    """
    Resolve the half-open query window from shortcut flags or explicit dates.

    ``--end`` is an inclusive calendar date, so the window runs to the
    following midnight. Returns (window_start, window_end).
    """
    if this_week and next_week:
        raise typer.BadParameter("--this-week and --next-week cannot be combined.")

    now = pendulum.now(tz)

    if this_week:
        return week_window(now, week_starts_on)

    if next_week:
        return week_window(now.add(weeks=1), week_starts_on)

    try:
        if start_option:
            window_start = pendulum.from_format(start_option, "YYYY-MM-DD", tz=tz).start_of("day")
        else:
            window_start = now.start_of("day")

        if end_option:
            window_end = pendulum.from_format(end_option, "YYYY-MM-DD", tz=tz).add(days=1).start_of("day")
        else:
            window_end = window_start.add(days=7)
    except ValueError as e:
        raise typer.BadParameter(f"Dates must use YYYY-MM-DD: {e}")

    return window_start, window_end


@app.command()
def expand(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    rules_file: Annotated[Optional[Path], typer.Option("--file", "-f", help="JSON export of availability_slots rows.")] = None,
    mentor: Annotated[Optional[str], typer.Option("--mentor", "-m", help="Only expand rules of this mentor id.")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="First day (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Last day, inclusive (YYYY-MM-DD)")] = None,
    this_week: Annotated[bool, typer.Option("--this-week", help="Expand the current week.")] = False,
    next_week: Annotated[bool, typer.Option("--next-week", help="Expand the coming week.")] = False,
    sessions: Annotated[bool, typer.Option("--sessions", help="Split slots into bookable sessions.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print slots as JSON.")] = False,
    as_list: Annotated[bool, typer.Option("--list", help="Print one line per slot instead of a table.")] = False,
):
    """
    Expand availability rules into concrete slots for a date window.

    Examples:

        # This week, rules from a JSON export
        mentorslots expand --file slots.json --this-week

        # Custom date range for one mentor, split into 15 minute sessions
        mentorslots expand -m mentor-1 --start 2024-03-01 --end 2024-03-31 --sessions
    """
    try:
        config = _load_config(config_file)
        tz = config.timezone

        window_start, window_end = _determine_window(
            tz=tz,
            week_starts_on=config.expansion.week_starts_on,
            this_week=this_week,
            next_week=next_week,
            start_option=start,
            end_option=end
        )

        service = AvailabilityService(
            rule_source=_build_rule_source(config, rules_file),
            expander=RecurrenceExpander(daily_day_limit=config.expansion.daily_day_limit),
            session_minutes=config.expansion.session_minutes,
            week_starts_on=config.expansion.week_starts_on,
        )

        slots = service.expanded_slots(
            mentor_id=mentor,
            window_start=window_start,
            window_end=window_end,
        )
        if sessions:
            slots = split_into_sessions(slots, config.expansion.session_minutes)

        if as_json:
            typer.echo(json.dumps([slot.to_dict() for slot in slots], indent=2))
            return

        console.print(
            f"\n[bold cyan]Availability[/bold cyan] "
            f"{window_start.format('YYYY-MM-DD')} - {window_end.subtract(days=1).format('YYYY-MM-DD')} ({tz})\n"
        )

        if not slots:
            console.print("[yellow]No availability in this window.[/yellow]\n")
            return

        if as_list:
            for slot in slots:
                console.print(f"  {slot.format_display(tz)}")
            console.print(f"\n[bold green]{len(slots)} slot(s)[/bold green]\n")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Day", style="bold yellow")
        table.add_column("Time")
        table.add_column("Minutes", justify="right")
        table.add_column("Pattern", style="dim")
        table.add_column("Rule", style="dim")

        for day_slots in group_by_day(slots, tz).values():
            for index, slot in enumerate(day_slots):
                local_start = slot.start_time.in_timezone(tz)
                local_end = slot.end_time.in_timezone(tz)
                table.add_row(
                    local_start.format("ddd DD.MM.") if index == 0 else "",
                    f"{local_start.format('HH:mm')} - {local_end.format('HH:mm')}",
                    str(slot.duration_minutes),
                    slot.recurring_pattern or "one-off",
                    slot.original_slot_id,
                )

        console.print(table)
        console.print(f"\n[bold green]{len(slots)} slot(s)[/bold green]\n")

    except (FileNotFoundError, ValueError, MentorSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def rules(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
    rules_file: Annotated[Optional[Path], typer.Option("--file", "-f", help="JSON export of availability_slots rows.")] = None,
    mentor: Annotated[Optional[str], typer.Option("--mentor", "-m", help="Only list rules of this mentor id.")] = None,
):
    """
    List the stored availability rules.
    """
    try:
        config = _load_config(config_file)
        source = _build_rule_source(config, rules_file)
        stored = source.get_rules(mentor)

        if not stored:
            console.print("[yellow]No availability rules found.[/yellow]")
            return

        tz = config.timezone
        table = Table(
            title="Availability rules",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Id", style="bold yellow")
        table.add_column("Anchor")
        table.add_column("Minutes", justify="right")
        table.add_column("Repeats")
        table.add_column("Until")
        table.add_column("Active")

        for rule in stored:
            until = rule.last_occurrence_date
            table.add_row(
                rule.id,
                rule.start_time.in_timezone(tz).format("YYYY-MM-DD HH:mm"),
                str(rule.duration_minutes),
                str(rule.recurring_pattern or "?") if rule.is_recurring else "no",
                until.isoformat() if until else "-",
                "yes" if rule.is_active else "no",
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, MentorSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]mentorslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
