"""Request/response facade over the ledger services."""

from fintrack.api.handlers import LedgerAPI, entry_to_dict

__all__ = ["LedgerAPI", "entry_to_dict"]
