"""CLI for Cospend using Typer."""

import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import load_settings
from .exceptions import ProjectFileError
from .models import BalanceMap, MemberId, Project, Settlement
from .service import SettlementService, with_bills
from .settlement import zero_threshold

app = typer.Typer(
    name="cospend",
    help="Settle shared expenses between project members",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def load_project(path: Path) -> Project:
    """Read a project document (members and bills) from a JSON file."""
    try:
        return Project.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ProjectFileError(f"Cannot read project file {path}: {e}") from e
    except ValidationError as e:
        raise ProjectFileError(f"Invalid project file {path}:\n{e}") from e


def resolve_member_id(project: Project, value: str) -> MemberId:
    """
    Map a member id typed on the command line to the project's member id.

    Member ids may be integers in the project file while the CLI only sees
    strings. Unknown values are returned unchanged.
    """
    for member in project.members:
        if str(member.id) == value:
            return member.id
    return value


def format_money(amount: float, symbol: str = "$", use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            formatted = f"({symbol}[red]{abs_amount:,.2f}[/red])"
        else:
            formatted = f"({symbol}{abs_amount:,.2f})"
    else:
        if use_color:
            formatted = f" [green]{symbol}{abs_amount:,.2f}[/green] "
        else:
            formatted = f" {symbol}{abs_amount:,.2f} "
    return formatted


def visible_balances(project: Project, balances: BalanceMap) -> BalanceMap:
    """Balances to display: deactivated members are hidden once settled."""
    inactive = {member.id for member in project.members if not member.activated}
    return {
        member_id: balance
        for member_id, balance in balances.items()
        if member_id not in inactive or abs(balance) >= zero_threshold()
    }


def display_settlement(project: Project, settlement: Settlement, symbol: str = "$"):
    """Display balances and settlement transactions in table format."""
    names = project.member_names()

    balance_table = Table(
        title="Balances", show_header=True, header_style="bold magenta"
    )
    balance_table.add_column("Member", style="cyan")
    balance_table.add_column("Balance", justify="right", width=14)
    for member_id, balance in visible_balances(project, settlement.balances).items():
        balance_table.add_row(
            names.get(member_id, str(member_id)), format_money(balance, symbol)
        )
    console.print(balance_table)

    title = "Settlement"
    if settlement.centered_on is not None:
        center_name = names.get(settlement.centered_on, str(settlement.centered_on))
        title += f" (centered on {center_name})"

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Who pays?", style="cyan")
    table.add_column("To whom?", style="cyan")
    table.add_column("How much?", justify="right", width=14)
    for transaction in settlement.transactions:
        table.add_row(
            names.get(transaction.from_id, str(transaction.from_id)),
            names.get(transaction.to_id, str(transaction.to_id)),
            format_money(transaction.amount, symbol),
        )
    console.print(table)

    if not settlement.transactions:
        console.print("[green]✓ Everyone is settled[/green]")


@app.command()
def settle(
    project_file: Path = typer.Argument(..., help="Project JSON file"),
    center: str | None = typer.Option(
        None, "--center", "-c", help="Settle everyone with this member id"
    ),
    max_timestamp: int | None = typer.Option(
        None, "--max-timestamp", help="Only include bills dated before this time"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show the settlement plan of a project.

    By default the plan minimizes the number of transactions. Use --center
    to have every member settle with one member instead.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = SettlementService(settings)
        project = load_project(project_file)

        centered_on = resolve_member_id(project, center) if center else None
        settlement = service.get_project_settlement(
            project, centered_on=centered_on, max_timestamp=max_timestamp
        )

        if as_json:
            console.print_json(settlement.model_dump_json(by_alias=True))
            return

        console.print(f"\n[bold]Project:[/bold] {project.name}\n")
        display_settlement(project, settlement, settings.currency_symbol)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


@app.command("auto-settle")
def auto_settle(
    project_file: Path = typer.Argument(..., help="Project JSON file"),
    center: str | None = typer.Option(
        None, "--center", "-c", help="Settle everyone with this member id"
    ),
    precision: int | None = typer.Option(
        None, "--precision", "-p", help="Decimal places of reimbursement amounts"
    ),
    max_timestamp: int | None = typer.Option(
        None, "--max-timestamp", help="Only settle bills dated before this time"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the project with reimbursements here"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Create reimbursement bills that settle a project.

    Without --output the bills are only displayed.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = SettlementService(settings)
        project = load_project(project_file)

        centered_on = resolve_member_id(project, center) if center else None
        bills = service.auto_settlement(
            project,
            centered_on=centered_on,
            precision=precision,
            max_timestamp=max_timestamp,
        )

        if not bills:
            console.print("[green]✓ Nothing to settle[/green]")
            return

        table = Table(
            title="Reimbursement Bills", show_header=True, header_style="bold magenta"
        )
        table.add_column("ID", style="dim", width=6)
        table.add_column("What", style="cyan")
        table.add_column("Amount", justify="right", width=14)
        for bill in bills:
            table.add_row(
                str(bill.id),
                bill.what,
                format_money(bill.amount, settings.currency_symbol),
            )
        console.print(table)

        if output:
            updated = with_bills(project, bills)
            output.write_text(updated.model_dump_json(indent=2), encoding="utf-8")
            console.print(
                f"\n[bold green]✓ Wrote {len(bills)} reimbursement bills to "
                f"{output}[/bold green]"
            )

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    app()
