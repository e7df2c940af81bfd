"""
Construction Ledger - Source Package

Financial ledger for a single house-construction project: staged
construction payments, side expenses and the payment log that ties
them together.

DESIGN PRINCIPLES:
1. Status is derived, never stored as truth
2. Every paid increase leaves a payment in the log
3. Editing or deleting a payment moves the item it paid
4. Unreadable storage falls back to seed data, visibly in the log
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Construction Ledger Team"
