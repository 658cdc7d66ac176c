"""
Friends Ledger - Source Package

Tracks who owes whom between the user and a handful of friends,
with an assistant that can read the list and split bills.

DESIGN PRINCIPLES:
1. One ledger per session, no persistence
2. UI and assistant share the same transitions
3. Invalid input is ignored, never half-applied
4. Every change is audited
"""

__version__ = "1.0.0"
__author__ = "Friends Ledger Team"
