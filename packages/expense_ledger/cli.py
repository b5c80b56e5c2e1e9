"""CLI for the ``expense_ledger`` package.

The CLI is the presentation collaborator: it loads the ledger from the
configured backend (JSON file or database), dispatches one action, renders the
recomputed view with ``rich``, and asks for confirmation before destructive
actions. Environment variables are loaded from a local ``.env`` via
``python-dotenv`` without overriding ones already set. Business logic lives
in :mod:`expense_ledger.ledger` and the engine modules.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from .formatting import display_row, format_currency
from .ledger import Ledger
from .logging_setup import configure_logging, get_logger
from .models import ALL, TYPE_FILTERS, ActionResult, ChartSeries, ValidationError
from .persistence import open_backend
from .settings import LedgerSettings

_logger = get_logger("expense_ledger.cli")


@dataclass(slots=True)
class _CliState:
    settings: LedgerSettings
    month: str = ALL


def _console() -> Console:
    return Console(highlight=False, soft_wrap=True)


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _open_ledger(ctx: typer.Context) -> Ledger:
    state: _CliState = ctx.obj
    backend = open_backend(state.settings)
    ledger = Ledger.from_transactions(backend.load(), on_change=backend.save)
    try:
        ledger.set_month_filter(state.month)
    except ValidationError as e:
        raise _fail(str(e)) from e
    return ledger


def _report(result: ActionResult) -> None:
    if result.ok:
        typer.echo(result.message)
        return
    typer.echo(result.message, err=True)
    raise typer.Exit(1)


def _run(action: Callable[[], ActionResult]) -> ActionResult:
    try:
        result = action()
    except (OSError, SQLAlchemyError) as e:
        raise _fail(f"failed to save ledger: {e}") from e
    _report(result)
    return result


# ---- Renderers ---------------------------------------------------------------


def _render_chart(console: Console, chart: ChartSeries, *, width: int = 30) -> None:
    if chart.empty:
        console.print("No expense data to chart.")
        return
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(justify="right")
    table.add_column()
    table.add_column(justify="right")
    for bar in chart.bars:
        table.add_row(bar.label, "#" * round(bar.height / 100 * width), bar.value_label)
    console.print(table)


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Personal income/expense ledger with summaries, stats, charts and CSV export.",
)


@app.callback()
def _root(
    ctx: typer.Context,
    *,
    month: str = typer.Option(
        ALL, "--month", "-m", help="Month filter: 'all' or YYYY-MM. Applies to every view."
    ),
    data_file: Path | None = typer.Option(
        None, help="JSON ledger file (falls back to EXPENSE_LEDGER_DATA_FILE)."
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL; when set the database backend is used."
    ),
) -> None:
    """Load ``.env``, configure logging and resolve settings for subcommands."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()
    ctx.obj = _CliState(
        settings=LedgerSettings.from_env(data_file=data_file, database_url=database_url),
        month=month,
    )
    _logger.debug("cli:settings %s month=%s", ctx.obj.settings, month)


@app.command("add")
def add_cmd(
    ctx: typer.Context,
    description: str,
    amount: str,
    *,
    category: str = typer.Option("", "--category", "-c", help="Category label."),
    date: str | None = typer.Option(None, help="Calendar date YYYY-MM-DD (default: today)."),
    expense: bool = typer.Option(
        False, "--expense", "-e", help="Record the amount as an expense (negates it)."
    ),
    choose_category: bool = typer.Option(
        False, "--choose-category", help="Pick the category interactively."
    ),
) -> None:
    """Add a transaction. Positive amounts are income, negative are expenses."""

    ledger = _open_ledger(ctx)
    if choose_category:
        from .term_ui import prompt_category

        category = prompt_category((tx.category for tx in ledger.store), default=category)
    if expense and not amount.strip().startswith("-"):
        amount = f"-{amount.strip()}"
    _run(lambda: ledger.on_add(description, amount, category, date))


@app.command("edit")
def edit_cmd(
    ctx: typer.Context,
    tx_id: Annotated[int, typer.Argument(metavar="ID")],
    *,
    description: str | None = typer.Option(None, help="New description."),
    amount: str | None = typer.Option(
        None, help="New amount as a magnitude; an expense stays an expense."
    ),
    category: str | None = typer.Option(None, "--category", "-c", help="New category."),
    date: str | None = typer.Option(None, help="New date YYYY-MM-DD."),
) -> None:
    """Edit a transaction; omitted fields keep their current values."""

    ledger = _open_ledger(ctx)
    current = ledger.store.get(tx_id)
    if current is None:
        # Stale id: nothing to edit.
        typer.echo(f"No transaction with id {tx_id}.")
        return
    _run(
        lambda: ledger.on_edit(
            tx_id,
            description=current.description if description is None else description,
            amount=str(abs(current.amount)) if amount is None else amount,
            category=category,
            date=current.date.isoformat() if date is None else date,
        )
    )


@app.command("delete")
def delete_cmd(
    ctx: typer.Context,
    tx_id: Annotated[int, typer.Argument(metavar="ID")],
    *,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete one transaction by id."""

    ledger = _open_ledger(ctx)
    if ledger.store.get(tx_id) is None:
        typer.echo(f"No transaction with id {tx_id}.")
        return
    if not yes:
        from .term_ui import confirm_action

        if not confirm_action("Are you sure you want to delete this transaction?"):
            typer.echo("Cancelled.")
            return
    _run(lambda: ledger.on_delete(tx_id))


@app.command("clear")
def clear_cmd(
    ctx: typer.Context,
    *,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Remove every transaction."""

    ledger = _open_ledger(ctx)
    if len(ledger.store) and not yes:
        from .term_ui import confirm_action

        if not confirm_action(
            "Are you sure you want to clear ALL transactions? This action cannot be undone."
        ):
            typer.echo("Cancelled.")
            return
    _run(ledger.on_clear)


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    *,
    search: str = typer.Option("", "--search", "-s", help="Match description or category."),
    type_filter: str = typer.Option(
        "all", "--type", "-t", help=f"One of: {', '.join(TYPE_FILTERS)}."
    ),
) -> None:
    """List transactions (newest first) matching the filters."""

    ledger = _open_ledger(ctx)
    try:
        view = ledger.view(search=search, type_filter=type_filter)  # type: ignore[arg-type]
    except ValidationError as e:
        raise _fail(str(e)) from e

    console = _console()
    if not view.transactions:
        console.print("No transactions found.")
        return
    today = ledger.today()
    table = Table(title=f"Transactions ({len(view.transactions)})")
    table.add_column("ID", justify="right")
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    for tx in view.transactions:
        row = display_row(tx, today=today)
        style = "green" if row.kind == "income" else "red"
        table.add_row(
            str(row.id),
            row.date,
            escape(row.description),
            escape(row.category),
            f"[{style}]{escape(row.amount)}[/]",
        )
    console.print(table)


@app.command("summary")
def summary_cmd(ctx: typer.Context) -> None:
    """Balance, income and expense for the active month filter."""

    view = _open_ledger(ctx).view()
    table = Table(title="Summary", show_header=False)
    table.add_column()
    table.add_column(justify="right")
    table.add_row("Balance", format_currency(view.summary.balance))
    table.add_row("Income", format_currency(view.summary.total_income))
    table.add_row("Expense", format_currency(view.summary.total_expense))
    table.add_row(
        "Income share",
        f"{view.comparison.income_percent:.0f}%",
    )
    table.add_row("Expense share", f"{view.comparison.expense_percent:.0f}%")
    _console().print(table)


@app.command("stats")
def stats_cmd(ctx: typer.Context) -> None:
    """Quick stats: today, last 7 days, top category, monthly average."""

    stats = _open_ledger(ctx).view().stats
    table = Table(title="Quick stats", show_header=False)
    table.add_column()
    table.add_column(justify="right")
    table.add_row("Today", format_currency(stats.today_expense, short=True))
    table.add_row("This week", format_currency(stats.week_expense, short=True))
    table.add_row("Top category", stats.top_category_label)
    table.add_row("Avg / month", format_currency(stats.avg_monthly_expense, short=True))
    _console().print(table)


@app.command("chart")
def chart_cmd(ctx: typer.Context) -> None:
    """Expense histogram: by month of this year, or by day of the selected month."""

    view = _open_ledger(ctx).view()
    _render_chart(_console(), view.chart)


@app.command("months")
def months_cmd(ctx: typer.Context) -> None:
    """Months that have transactions, newest first."""

    options = _open_ledger(ctx).view().months
    if not options:
        typer.echo("No transactions yet.")
        return
    for opt in options:
        typer.echo(f"{opt.key}\t{opt.label}")


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    *,
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Target file (default: generated name in the CWD)."
    ),
) -> None:
    """Export the month-scoped transactions as CSV."""

    ledger = _open_ledger(ctx)
    result = ledger.on_export()
    if not result.ok or result.export is None:
        _report(result)
        return
    target = output or Path.cwd() / result.export.filename
    try:
        target.write_text(result.export.content + "\n", encoding="utf-8")
    except OSError as e:
        raise _fail(f"could not write {target}: {e}") from e
    typer.echo(f"{result.message}: {target}")


if __name__ == "__main__":  # pragma: no cover
    app()
