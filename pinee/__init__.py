"""
PINEE Ledger - Source Package

Core logic of the PINEE personal-finance app: typed transaction records,
the consolidated balance reduction, period date ranges and the
presentation rules for transaction list rows.

DESIGN PRINCIPLES:
1. Parse documents once, at the store boundary
2. Pure reductions, explicit results
3. Skipped input is reported, never silently dropped
4. Every significant action is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "PINEE Team"
