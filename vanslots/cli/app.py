"""
Main CLI application using Typer.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.http_client import HttpReservationClient
from ..adapters.mock_reservation_client import MockReservationClient
from ..config import AppConfig, get_default_config_path
from ..domain.booking_draft import (
    BookingDraft,
    BookingDraftReducer,
    ChooseDates,
    ChoosePickupTime,
    ChooseReturnTime,
    EnterDriverAge,
    SelectOffice,
)
from ..domain.clock import CLOSE_DEFAULT, OPEN_DEFAULT, to_minutes
from ..domain.engine import AvailabilityEngine
from ..domain.exceptions import VanSlotsError
from ..domain.models import SlotRole
from ..domain.pricing import PriceCalculator
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="vanslots",
    help="Office opening hours, pickup/return slots and extension pricing for van rentals",
    add_completion=False
)

console = Console()


class RoleOption(str, Enum):
    pickup = "pickup"
    return_ = "return"


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
MockOption = Annotated[bool, typer.Option("--mock", help="Use the bundled JSON data instead of the REST backend.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the explicit config file, or ./config.yaml if present, else defaults.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _build_service(config: AppConfig, mock: bool) -> AvailabilityService:
    if mock or not config.api_base_url:
        client = MockReservationClient(
            offices_file=config.offices_file,
            reservations_file=config.reservations_file,
            timezone=config.timezone,
        )
    else:
        client = HttpReservationClient(
            base_url=config.api_base_url,
            timezone=config.timezone,
            timeout=config.request_timeout_seconds,
        )

    engine = AvailabilityEngine(
        interval_minutes=config.slot_interval_minutes,
        rules=config.booking_rules(),
    )
    return AvailabilityService(lookup=client, engine=engine, timezone=config.timezone)


def _parse_date(value: str, tz: str):
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _parse_time(value: str) -> str:
    try:
        minutes = to_minutes(value)
    except VanSlotsError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@app.command()
def slots(
    office_id: Annotated[str, typer.Argument(help="Office id")],
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    role: Annotated[RoleOption, typer.Option("--role", "-r", help="Pickup or return times")] = RoleOption.pickup,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Show the selectable pickup or return times of an office on a date.

    Examples:

        vanslots slots office-central 2026-10-19 --mock

        vanslots slots office-central 2026-10-19 --role return
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, mock)
        query_day = _parse_date(day, config.timezone)
        slot_role = SlotRole(role.value)

        availability = asyncio.run(
            service.find_slots(office_id=office_id, day=query_day, role=slot_role)
        )
    except (FileNotFoundError, ValueError, VanSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if availability is None:
        console.print("[yellow]Lookup was superseded, no result.[/yellow]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]{office_id}[/bold cyan] - {query_day.isoformat()} ({slot_role.value})")
    if availability.window.info:
        console.print(f"[dim]{availability.window.info}[/dim]")

    if availability.is_empty:
        console.print(f"[yellow]⚠ {availability.message or 'No times available.'}[/yellow]\n")
        return

    cutoff = service.not_before(query_day)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Time", style="bold")
    table.add_column("Status")
    table.add_column("Extension fee", justify="right")

    for status in availability.slots:
        if status.reserved:
            state = "[red]reserved[/red]"
        elif cutoff and to_minutes(status.slot) < to_minutes(cutoff):
            state = "[dim]past[/dim]"
        else:
            state = "[green]available[/green]"
        fee = f"£{availability.price:g}" if status.surcharged else ""
        table.add_row(status.slot, state, fee)

    console.print(table)
    if availability.message:
        console.print(f"[yellow]{availability.message}[/yellow]")
    console.print()


@app.command()
def hours(
    office_id: Annotated[str, typer.Argument(help="Office id")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Show the weekly working hours and special days of an office.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, mock)
        office = asyncio.run(service.get_office(office_id))
    except (FileNotFoundError, ValueError, VanSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(title=office.name or office.id, show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold yellow")
    table.add_column("Hours")
    table.add_column("Pickup extension", style="dim")
    table.add_column("Return extension", style="dim")

    for weekday, summary in service.engine.resolver.weekly_summary(office):
        working_day = office.working_day(weekday)
        extensions = []
        for ext_role in (SlotRole.PICKUP, SlotRole.RETURN):
            extension = working_day.extension_for(ext_role) if working_day else None
            if extension is None or extension.is_zero:
                extensions.append("")
            else:
                extensions.append(
                    f"-{extension.hours_before:g}h / +{extension.hours_after:g}h, £{extension.flat_price:g}"
                )
        table.add_row(weekday.value.capitalize(), summary, *extensions)

    console.print()
    console.print(table)

    if office.special_days:
        special_table = Table(title="Special days", show_header=True, header_style="bold cyan")
        special_table.add_column("Date", style="bold yellow")
        special_table.add_column("Hours")
        special_table.add_column("Reason", style="dim")
        for special in sorted(office.special_days, key=lambda s: (s.month, s.day)):
            if special.is_open:
                window = f"{special.start_time or OPEN_DEFAULT} - {special.end_time or CLOSE_DEFAULT}"
            else:
                window = "Closed"
            special_table.add_row(f"{special.day:02d}.{special.month:02d}.", window, special.reason or "")
        console.print(special_table)

    console.print()


@app.command()
def quote(
    office_id: Annotated[str, typer.Argument(help="Office id")],
    start_date: Annotated[str, typer.Argument(help="Pickup date (YYYY-MM-DD)")],
    start_time: Annotated[str, typer.Argument(help="Pickup time (HH:MM)")],
    end_date: Annotated[str, typer.Argument(help="Return date (YYYY-MM-DD)")],
    end_time: Annotated[str, typer.Argument(help="Return time (HH:MM)")],
    add_ons: Annotated[float, typer.Option("--add-ons", help="Add-ons total in £")] = 0,
    discount: Annotated[float, typer.Option("--discount", help="Discount code percentage")] = 0,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Price a rental including pickup/return extension fees.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, mock)
        office = asyncio.run(service.get_office(office_id))
    except (FileNotFoundError, ValueError, VanSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    tz = config.timezone
    pickup_day = _parse_date(start_date, tz)
    return_day = _parse_date(end_date, tz)
    pickup_time = _parse_time(start_time)
    return_time = _parse_time(end_time)

    pickup_fee, return_fee = service.engine.extension_prices(
        office, pickup_day, pickup_time, return_day, return_time
    )

    start = pendulum.parse(f"{pickup_day.isoformat()}T{pickup_time}", tz=tz)
    end = pendulum.parse(f"{return_day.isoformat()}T{return_time}", tz=tz)

    result = PriceCalculator().calculate(
        start,
        end,
        config.pricing_tiers(),
        extra_hours_rate=config.pricing.extra_hours_rate,
        pickup_extension_price=pickup_fee,
        return_extension_price=return_fee,
        add_ons_price=add_ons,
    )

    lines = [
        f"[bold]Pickup extension:[/bold] £{pickup_fee:g}",
        f"[bold]Return extension:[/bold] £{return_fee:g}",
    ]
    if result is None:
        lines.append("[yellow]No price: configure pricing tiers and a positive rental duration.[/yellow]")
    else:
        total = result.total_price
        lines.append(f"[bold]Duration:[/bold] {result.total_days} day(s), {result.extra_hours} extra hour(s)")
        lines.append(f"[bold]Breakdown:[/bold] {result.breakdown}")
        if discount:
            try:
                total = PriceCalculator.apply_discount(total, discount)
            except ValueError as e:
                console.print(f"[bold red]Error:[/bold red] {e}")
                raise typer.Exit(1)
            lines.append(f"[bold]Discount:[/bold] {discount:g}%")
        lines.append(f"[bold green]Total: £{total:.2f}[/bold green]")

    console.print()
    console.print(Panel.fit("\n".join(lines), title=f"Quote - {office.name or office.id}"))
    console.print()


@app.command()
def check(
    office_id: Annotated[str, typer.Argument(help="Office id")],
    start_date: Annotated[str, typer.Argument(help="Pickup date (YYYY-MM-DD)")],
    start_time: Annotated[str, typer.Argument(help="Pickup time (HH:MM)")],
    end_date: Annotated[str, typer.Argument(help="Return date (YYYY-MM-DD)")],
    end_time: Annotated[str, typer.Argument(help="Return time (HH:MM)")],
    age: Annotated[int, typer.Option("--age", help="Driver age")] = 25,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Validate a complete booking against availability and booking rules.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        service = _build_service(config, mock)
        office = asyncio.run(service.get_office(office_id))
    except (FileNotFoundError, ValueError, VanSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    tz = config.timezone
    pickup_day = _parse_date(start_date, tz)
    return_day = _parse_date(end_date, tz)

    reducer = BookingDraftReducer(service.engine)
    draft = reducer.reduce(BookingDraft(), SelectOffice(office))
    errors = []

    draft = reducer.reduce(draft, ChooseDates(pickup_day, return_day))
    errors.extend(draft.errors)

    for role, day in ((SlotRole.PICKUP, pickup_day), (SlotRole.RETURN, return_day)):
        try:
            event = asyncio.run(service.reservations_event(office_id=office.id, day=day, role=role))
        except VanSlotsError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(1)
        if event is not None:
            draft = reducer.reduce(draft, event)

    for event in (
        ChoosePickupTime(_parse_time(start_time)),
        ChooseReturnTime(_parse_time(end_time)),
        EnterDriverAge(age),
    ):
        draft = reducer.reduce(draft, event)
        errors.extend(draft.errors)

    if draft.is_valid:
        console.print(f"\n[bold green]✓ Booking is valid[/bold green] ({draft.stage.value})\n")
        return

    console.print(f"\n[bold red]✗ Booking is not valid[/bold red] (stopped at {draft.stage.value})")
    for error in dict.fromkeys(errors):
        console.print(f"  • {error}")
    console.print()
    raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]vanslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
