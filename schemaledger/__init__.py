"""
schemaledger

Applies versioned SQL migration scripts exactly once each, in filename order,
and records every applied script in a ledger table.
"""

__version__ = "0.1.0"
