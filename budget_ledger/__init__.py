"""
Budget Ledger - Source Package

A small personal ledger that records income and expense entries
and derives running totals (income, expenses, net budget).

DESIGN PRINCIPLES:
1. Validate at the door, never after the fact
2. The in-memory ledger is the source of truth
3. Persistence is best-effort and never breaks a mutation
4. Every user action is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Ledger Team"
