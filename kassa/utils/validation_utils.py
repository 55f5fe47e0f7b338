"""
kassa/utils/validation_utils.py

Purpose: Input validation

- E-mail normalization
- Money rounding and payment totals
- Chat text sanitization
"""

import re
from typing import Iterable, Mapping, Any

from kassa.utils.constants import PAYMENT_TOLERANCE


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    """
    Trims and lower-cases an e-mail address and checks its shape.

    Args:
        email: Raw e-mail input

    Returns:
        Normalized e-mail

    Raises:
        ValueError: If the address does not look like an e-mail
    """
    email = (email or "").strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Format email tidak valid.")
    return email


def round_money(amount: float) -> float:
    """
    Rounds a money amount to two decimals.
    Keeps float arithmetic noise (0.1 * 3) out of stored totals.
    """
    return round(float(amount), 2)


def total_paid(payments: Iterable[Any]) -> float:
    """
    Sums payment amounts.

    Accepts Payment models or plain dicts as stored in MongoDB.
    """
    paid = 0.0
    for payment in payments or []:
        if isinstance(payment, Mapping):
            paid += float(payment.get("amount") or 0)
        else:
            paid += float(getattr(payment, "amount", 0) or 0)
    return round_money(paid)


def payments_match_total(payments: Iterable[Any], total_due: float) -> bool:
    """
    Checks that what was paid equals what is due, within PAYMENT_TOLERANCE.
    """
    return abs(total_paid(payments) - float(total_due)) < PAYMENT_TOLERANCE


def remaining_amount(total_due: float, payments: Iterable[Any]) -> float:
    """
    Amount still to be paid. Negative when overpaid.
    """
    return round_money(float(total_due) - total_paid(payments))


def sanitize_input(text: str, max_length: int = 2000) -> str:
    """
    Sanitizes free text such as chat messages.

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Text with control characters removed and ends trimmed
    """
    if not text:
        return ""

    text = text[:max_length]

    # Strip control characters but keep newlines and tabs
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)

    return text.strip()
