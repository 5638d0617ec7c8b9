"""
Data Models Package

This package contains all Pydantic models used in PINEE.
All data flowing through the system must conform to these schemas.
"""

from pinee.models.transaction import (
    CONSOLIDATED_INCOME_STATUSES,
    CategoryBreakdown,
    CategoryTotal,
    ConsolidationResult,
    DateRange,
    PeriodFilter,
    ProjectedTotals,
    SkippedRecord,
    TransactionRecord,
    TransactionStatus,
    TransactionType,
)
from pinee.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "CONSOLIDATED_INCOME_STATUSES",
    "CategoryBreakdown",
    "CategoryTotal",
    "ConsolidationResult",
    "DateRange",
    "PeriodFilter",
    "ProjectedTotals",
    "SkippedRecord",
    "TransactionRecord",
    "TransactionStatus",
    "TransactionType",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
