"""Trade journal: realised and unrealised profit ledger for brokerage trades."""

__version__ = "0.1.0"
