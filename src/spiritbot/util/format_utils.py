from datetime import datetime

import discord

_ROMAN_NUMERALS = (
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
)


def int_to_roman(value: int) -> str:
    """Render a positive integer as a roman numeral (4 -> "IV", 14 -> "XIV").

    Args:
        value: Integer greater than zero.

    Raises:
        ValueError: If ``value`` is not positive.
    """
    if value <= 0:
        raise ValueError(f"Roman numerals need a positive integer, got {value}")

    parts: list[str] = []
    for magnitude, numeral in _ROMAN_NUMERALS:
        count, value = divmod(value, magnitude)
        parts.append(numeral * count)
    return "".join(parts)


def badge_title(emote: str, name: str, count: int) -> str:
    """Profile field title for a badge, with a roman suffix when held more than once."""
    suffix = f" {int_to_roman(count)}" if count > 1 else ""
    return f"{emote} {name}{suffix}"


def full_timestamp(value: datetime) -> str:
    """Discord timestamp markup rendering the full date and time in the reader's timezone."""
    return discord.utils.format_dt(value, style="F")


def long_date(value: datetime) -> str:
    """Discord timestamp markup rendering a long date."""
    return discord.utils.format_dt(value, style="D")


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"
