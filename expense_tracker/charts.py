"""Plotly figures for the dashboard and the category colour table."""

from decimal import Decimal
from typing import Dict, List, Tuple

import plotly.express as px
import plotly.graph_objects as go

from expense_tracker.domain import BucketTotals, Category

CATEGORY_COLORS: Dict[Category, str] = {
    Category.FOOD: "hsl(38, 92%, 50%)",
    Category.TRAVEL: "hsl(199, 89%, 48%)",
    Category.BILLS: "hsl(0, 72%, 51%)",
    Category.SHOPPING: "hsl(262, 52%, 47%)",
    Category.HEALTH: "hsl(152, 60%, 40%)",
    Category.ENTERTAINMENT: "hsl(328, 80%, 50%)",
    Category.WORK: "hsl(220, 70%, 50%)",
    Category.OTHER: "hsl(220, 10%, 50%)",
}

INCOME_COLOR = "hsl(152, 60%, 40%)"
EXPENSE_COLOR = "hsl(0, 72%, 51%)"


def category_pie(breakdown: Dict[Category, Decimal], title: str = "Expenses by Category") -> go.Figure:
    names = [c.value for c in breakdown]
    fig = px.pie(
        names=names,
        values=[float(v) for v in breakdown.values()],
        color=names,
        color_discrete_map={c.value: CATEGORY_COLORS[c] for c in breakdown},
        title=title,
        hole=0.4,
        template="plotly_dark",
    )
    fig.update_layout(margin=dict(t=40, b=10, l=10, r=10))
    return fig


def _income_expense_bars(labels: List[str], rows: List[BucketTotals], title: str) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Bar(x=labels, y=[float(r.income) for r in rows], name="Income",
                         marker_color=INCOME_COLOR))
    fig.add_trace(go.Bar(x=labels, y=[float(r.expense) for r in rows], name="Expense",
                         marker_color=EXPENSE_COLOR))
    fig.update_layout(barmode="group", title=title, template="plotly_dark",
                      margin=dict(t=40, b=10, l=10, r=10))
    return fig


def bucket_bar(buckets: Dict[str, BucketTotals], title: str = "Income vs Expense") -> go.Figure:
    return _income_expense_bars(list(buckets), list(buckets.values()), title)


def daily_bar(series: List[Tuple[str, BucketTotals]], title: str = "Last 7 Days") -> go.Figure:
    return _income_expense_bars([label for label, _ in series], [row for _, row in series], title)
