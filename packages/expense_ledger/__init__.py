"""Public interface for the ``expense_ledger`` package.

Symbol re-exports only: the transaction store, the ledger controller, the
pure engine functions (filters, aggregates, chart series, formatters, CSV
export) and the public models.
"""

from .aggregate import compute_quick_stats, summarize
from .charts import (
    comparison_series,
    daily_expense_series,
    expense_chart,
    monthly_expense_series,
)
from .export import export_filename, export_rows, render_csv
from .filters import (
    filter_transactions,
    matches,
    month_options,
    month_scoped,
    resolve_month_filter,
)
from .formatting import capitalize_category, format_currency, format_date, month_label
from .ledger import Ledger
from .models import (
    ActionResult,
    ChartBar,
    ChartSeries,
    ComparisonSeries,
    CsvExport,
    LedgerQuery,
    LedgerView,
    MonthOption,
    QuickStats,
    Summary,
    Transaction,
    ValidationError,
)
from .store import TransactionStore

__all__ = [
    # Store / controller
    "TransactionStore",
    "Ledger",
    # Engine
    "matches",
    "filter_transactions",
    "month_scoped",
    "month_options",
    "resolve_month_filter",
    "summarize",
    "compute_quick_stats",
    "comparison_series",
    "monthly_expense_series",
    "daily_expense_series",
    "expense_chart",
    "format_currency",
    "format_date",
    "capitalize_category",
    "month_label",
    "export_rows",
    "render_csv",
    "export_filename",
    # Models / types
    "Transaction",
    "LedgerQuery",
    "LedgerView",
    "Summary",
    "QuickStats",
    "ComparisonSeries",
    "ChartBar",
    "ChartSeries",
    "MonthOption",
    "CsvExport",
    "ActionResult",
    "ValidationError",
]
