import asyncio
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

import pandas as pd

from expense_tracker.domain import ReportData, Transaction
from expense_tracker.errors import EmptyReportError

CSV_COLUMNS = ["Title", "Amount", "Date", "Type", "Category"]


def transactions_frame(trans: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {
            "Title": t.title,
            "Amount": str(t.amount),
            "Date": t.date.isoformat(),
            "Type": t.type.value,
            "Category": t.category.value,
        }
        for t in trans
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def transactions_to_csv(trans: Iterable[Transaction]) -> str:
    """CSV with a header row; fields holding commas or quotes are quoted."""
    return transactions_frame(trans).to_csv(index=False, lineterminator="\n")


def report_to_csv(report: ReportData) -> str:
    return transactions_to_csv(report.transactions)


def category_frame(report: ReportData) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Category": c.value, "Amount": str(a)} for c, a in report.category_breakdown.items()],
        columns=["Category", "Amount"],
    )


def summary_frame(report: ReportData) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"Metric": "Total Income", "Amount": str(report.total_income)},
            {"Metric": "Total Expense", "Amount": str(report.total_expense)},
            {"Metric": "Balance", "Amount": str(report.balance)},
        ]
    )


def export_filename(prefix: str, today: Optional[date] = None, ext: str = "csv") -> str:
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.{ext}"


def report_filename(report: ReportData, today: Optional[date] = None) -> str:
    return export_filename(f"{report.granularity.value}_report", today)


def ensure_exportable(report: ReportData) -> ReportData:
    if report.is_empty:
        raise EmptyReportError(report.title, report.period_label)
    return report


def write_report_csv(report: ReportData, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report_to_csv(report), encoding="utf-8")
    return path


async def export_reports(
    reports: Mapping[str, ReportData], directory: Path, today: Optional[date] = None
) -> Dict[str, Path]:
    """Write each report to its own CSV concurrently.

    reports: mapping name -> report. Returns mapping name -> written path.
    """
    async def export_one(name: str, report: ReportData) -> tuple[str, Path]:
        target = Path(directory) / export_filename(f"{name}_report", today)
        written = await asyncio.to_thread(write_report_csv, report, target)
        return name, written

    results = await asyncio.gather(*(export_one(n, r) for n, r in reports.items()))
    return {k: v for k, v in results}
