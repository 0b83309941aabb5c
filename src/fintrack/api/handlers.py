"""Request handlers for the ledger API.

Each handler validates its payload, calls the domain services and returns a
JSON-ready dict (camelCase keys, money as two-decimal strings). Domain
errors propagate unchanged; malformed payloads raise ValidationError.
"""

from typing import Any, Union

import pydantic

from fintrack.api.schemas import (
    EntryRequest,
    EntryResponse,
    EntryUpdateRequest,
    GoalProgressResponse,
    TransferRequest,
    TransferResponse,
)
from fintrack.database.base import Database
from fintrack.domain.balance import BalanceReconciler
from fintrack.domain.entities import LedgerEntry
from fintrack.domain.errors import ValidationError
from fintrack.domain.goal import GoalService
from fintrack.domain.ledger import LedgerService
from fintrack.utils.amount_parser import format_amount

JSONDict = dict[str, Any]


def _parse(model: type[pydantic.BaseModel], payload: dict) -> Any:
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"Invalid request: {details}") from None


def entry_to_dict(entry: LedgerEntry) -> JSONDict:
    """Serialize an entry for the wire."""
    return EntryResponse.model_validate(entry).model_dump(mode="json", by_alias=True)


class LedgerAPI:
    """Facade exposing ledger operations as request/response handlers."""

    def __init__(self, db: Database):
        """Initialize the API.

        Args:
            db: Database instance
        """
        self.db = db
        self.ledger = LedgerService(db)
        self.balances = BalanceReconciler(db)
        self.goals = GoalService(db)

    def post_entry(self, user_id: int, payload: dict) -> Union[JSONDict, list[JSONDict]]:
        """Record an entry. Returns a list whenever the request was recurring."""
        request = _parse(EntryRequest, payload)
        entries = self.ledger.record_entry(
            user_id,
            description=request.description,
            amount=request.amount,
            date=request.date,
            category_id=request.category_id,
            account_id=request.account_id,
            transaction_type=request.transaction_type,
            recurring_type=request.recurring_type,
            recurring_frequency=request.recurring_frequency,
            recurring_interval=request.recurring_interval,
            installment_total=request.installment_total,
            recurring_end_date=request.recurring_end_date,
        )
        if request.is_recurring:
            return [entry_to_dict(entry) for entry in entries]
        return entry_to_dict(entries[0])

    def post_transfer(self, user_id: int, payload: dict) -> JSONDict:
        """Record a transfer. Returns the transfer id and both entries."""
        request = _parse(TransferRequest, payload)
        pair = self.ledger.record_transfer(
            user_id,
            description=request.description,
            amount=request.amount,
            date=request.date,
            from_account_id=request.from_account_id,
            to_account_id=request.to_account_id,
            category_id=request.category_id,
        )
        response = TransferResponse(
            transfer_id=pair.transfer.id,
            out_entry=EntryResponse.model_validate(pair.out_entry),
            in_entry=EntryResponse.model_validate(pair.in_entry),
        )
        return response.model_dump(mode="json", by_alias=True)

    def put_entry(self, user_id: int, entry_id: int, payload: dict) -> JSONDict:
        request = _parse(EntryUpdateRequest, payload)
        entry = self.ledger.update_entry(user_id, entry_id, **request.model_dump(exclude_none=True))
        return entry_to_dict(entry)

    def delete_entry(self, user_id: int, entry_id: int) -> JSONDict:
        self.ledger.delete_entry(user_id, entry_id)
        return {"deleted": True, "entryId": entry_id}

    def delete_transfer(self, user_id: int, transfer_id: int) -> JSONDict:
        self.ledger.delete_transfer(user_id, transfer_id)
        return {"deleted": True, "transferId": transfer_id}

    def get_balance(self, user_id: int, account_id: int) -> str:
        return format_amount(self.balances.get_balance(user_id, account_id))

    def recompute_balance(self, user_id: int, account_id: int) -> str:
        return format_amount(self.balances.recompute(user_id, account_id))

    def get_goal_progress(self, user_id: int, goal_id: int) -> JSONDict:
        progress = self.goals.progress(user_id, goal_id)
        return GoalProgressResponse.model_validate(progress).model_dump(mode="json", by_alias=True)
