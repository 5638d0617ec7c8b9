"""Balance calculation package."""

from pinee.balance.categories import (
    calculate_percentage,
    category_breakdown,
    summarize_categories,
)
from pinee.balance.consolidation import (
    consolidate_balance,
    consolidate_documents,
    project_totals,
)

__all__ = [
    "calculate_percentage",
    "category_breakdown",
    "summarize_categories",
    "consolidate_balance",
    "consolidate_documents",
    "project_totals",
]
