"""Expansion of recurring and installment requests into concrete entries."""

from dataclasses import replace
from datetime import date
from typing import Optional

from fintrack.domain.entities import (
    EntryDraft,
    FREQUENCIES,
    RECURRING_ADVANCED,
    RECURRING_INSTALLMENT,
    RECURRING_NONE,
    RECURRING_TYPES,
)
from fintrack.domain.errors import ValidationError
from fintrack.utils.amount_parser import split_amount
from fintrack.utils.date_parser import shift_date

# Hard cap on generated occurrences; also the largest installment plan
MAX_OCCURRENCES = 360
DEFAULT_INSTALLMENT_FREQUENCY = "monthly"


def expand(
    base: EntryDraft,
    recurring_type: str,
    frequency: Optional[str] = None,
    interval: int = 1,
    installment_total: Optional[int] = None,
    end_date: Optional[date] = None,
) -> list[EntryDraft]:
    """Expand one entry request into the entries it stands for.

    Args:
        base: The entry as requested; its date anchors the series
        recurring_type: "none", "installment" or "advanced"
        frequency: daily, weekly, monthly or yearly. Installments default
            to monthly; advanced recurrence requires it.
        interval: Number of frequency units between occurrences
        installment_total: Number of installments
        end_date: Last date an advanced occurrence may fall on

    Returns:
        Unsaved drafts in date order. Never touches balances.

    Raises:
        ValidationError: If the rule is malformed
    """
    if recurring_type not in RECURRING_TYPES:
        raise ValidationError(
            f"Unknown recurring type: '{recurring_type}'. Supported: {', '.join(RECURRING_TYPES)}"
        )
    if interval is None:
        interval = 1
    if interval < 1:
        raise ValidationError("Recurring interval must be at least 1")
    if frequency is not None and frequency not in FREQUENCIES:
        raise ValidationError(
            f"Unknown frequency: '{frequency}'. Supported: {', '.join(FREQUENCIES)}"
        )
    if end_date is not None and end_date < base.date:
        raise ValidationError(
            f"Recurring end date {end_date.isoformat()} is before start date {base.date.isoformat()}"
        )

    if recurring_type == RECURRING_NONE:
        return [base]
    if recurring_type == RECURRING_INSTALLMENT:
        return _installments(base, frequency or DEFAULT_INSTALLMENT_FREQUENCY, interval,
                             installment_total, end_date)
    return _occurrences(base, frequency, interval, end_date)


def _installments(
    base: EntryDraft,
    frequency: str,
    interval: int,
    installment_total: Optional[int],
    end_date: Optional[date],
) -> list[EntryDraft]:
    if installment_total is None:
        raise ValidationError("Installment plans require an installment total")
    if installment_total < 1 or installment_total > MAX_OCCURRENCES:
        raise ValidationError(f"Installment total must be between 1 and {MAX_OCCURRENCES}")

    shares = split_amount(base.amount, installment_total)
    return [
        replace(
            base,
            amount=share,
            date=shift_date(base.date, frequency, index * interval),
            is_recurring=True,
            recurring_type=RECURRING_INSTALLMENT,
            recurring_frequency=frequency,
            recurring_interval=interval,
            installment_total=installment_total,
            installment_current=index + 1,
            recurring_end_date=end_date,
        )
        for index, share in enumerate(shares)
    ]


def _occurrences(
    base: EntryDraft,
    frequency: Optional[str],
    interval: int,
    end_date: Optional[date],
) -> list[EntryDraft]:
    if frequency is None:
        raise ValidationError("Advanced recurrence requires a frequency")

    drafts = []
    for index in range(MAX_OCCURRENCES):
        # Always step from the anchor so month-end dates clamp, not drift
        occurrence = shift_date(base.date, frequency, index * interval)
        if end_date is not None and occurrence > end_date:
            break
        drafts.append(
            replace(
                base,
                date=occurrence,
                is_recurring=True,
                recurring_type=RECURRING_ADVANCED,
                recurring_frequency=frequency,
                recurring_interval=interval,
                installment_total=None,
                installment_current=None,
                recurring_end_date=end_date,
            )
        )
    return drafts
