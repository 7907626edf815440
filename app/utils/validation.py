from datetime import datetime

from app.exceptions import ValidationError
from app.store.timestamps import from_store_timestamp


def ensure_date_range(date_from: datetime | None, date_to: datetime | None) -> None:
    """
    Ensure an inclusive date range is not inverted.

    Raises:
        ValidationError: If both bounds are given and `date_from` is after `date_to`.
    """
    if not (date_from and date_to):
        return
    # Bring aware and naive bounds onto the same local naive clock
    if from_store_timestamp(date_from) > from_store_timestamp(date_to):  # type: ignore[operator]
        raise ValidationError("date_from must not be after date_to", field="date_from")


def mask_phone(phone: str) -> str:
    """
    Mask a phone number for safe logging.
    Example: '0123456789' -> '******6789'
    """
    digits = (phone or "").strip()
    if len(digits) <= 4:
        return "*" * len(digits)
    return "*" * (len(digits) - 4) + digits[-4:]
