"""
finsheet - Source Package

Normalizes hand-maintained personal-finance workbooks into clean monthly
time series, and derives the numbers a personal-finance dashboard needs:
savings rate, net worth, a trend projection, and FI progress.

DESIGN PRINCIPLES:
1. Spreadsheets are messy - parse leniently, explain what was dropped
2. Totals are always recomputed, never trusted from the sheet
3. Derived data is rebuilt from scratch after every change
4. Every step is auditable
5. Layout conventions live in configuration, not in code
"""

__version__ = "1.0.0"
__author__ = "finsheet Team"
