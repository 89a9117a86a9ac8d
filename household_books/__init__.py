"""
Household Books - Account Core

Per-user accounts for a shared household bookkeeping application:
asset accounts, expense items and income sources, links between friends'
accounts, and a guard against deleting accounts that have ledger history.

DESIGN PRINCIPLES:
1. Account types are a closed, explicitly registered set
2. Validate before every write, never fix silently
3. Nothing with ledger history is ever destroyed
4. Both sides of a connection change together or not at all
5. Storage, ledger and friend graph are swappable collaborators
"""

__version__ = "1.0.0"
__author__ = "Household Books Team"
