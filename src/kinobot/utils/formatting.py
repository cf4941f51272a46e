"""Presentation helpers for numbers and long text."""

DESCRIPTION_LIMIT = 500
ELLIPSIS = "..."


def format_currency(value: int, separator: str = ",") -> str:
    """Group an integer amount in thousands.

    Groups are taken right to left from the least significant digit,
    so ``1234567`` becomes ``"1,234,567"`` and ``7`` stays ``"7"``.

    Args:
        value: Non-negative integer amount
        separator: Group separator

    Returns:
        Grouped digit string without currency symbol
    """
    if value < 0:
        raise ValueError(f"Currency amount must be non-negative, got {value}")

    digits = str(value)
    groups = []
    while len(digits) > 3:
        groups.append(digits[-3:])
        digits = digits[:-3]
    groups.append(digits)
    return separator.join(reversed(groups))


def truncate_description(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    """Cut text to ``limit`` characters and mark the cut with an ellipsis.

    Text that already fits is returned unchanged.
    """
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS
