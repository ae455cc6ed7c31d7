"""
Coffee Bar Bookkeeper - Source Package

A conversational bookkeeping assistant for a small coffee and matcha
bar: sales, partial-payment debts and settlements, written to a
spreadsheet the owner can read directly.

DESIGN PRINCIPLES:
1. AI guesses → heuristics correct → catalog prices
2. Money is computed, never taken from the model
3. Reject overpayments instead of guessing what was meant
4. Totals are recomputed from the ledger, never cached
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Coffee Bar Bookkeeper Team"
