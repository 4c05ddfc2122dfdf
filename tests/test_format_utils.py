from datetime import datetime, timezone

import pytest

from spiritbot.util import format_utils


@pytest.mark.parametrize(
    "value,expected",
    [(1, "I"), (2, "II"), (4, "IV"), (9, "IX"), (14, "XIV"), (40, "XL"), (1994, "MCMXCIV")],
)
def test_int_to_roman(value, expected):
    assert format_utils.int_to_roman(value) == expected


@pytest.mark.parametrize("value", [0, -3])
def test_int_to_roman_rejects_non_positive(value):
    with pytest.raises(ValueError):
        format_utils.int_to_roman(value)


def test_badge_title_has_no_suffix_for_single_badge():
    assert format_utils.badge_title("🎨", "Creative", 1) == "🎨 Creative"


def test_badge_title_appends_roman_count():
    assert format_utils.badge_title("🎨", "Creative", 4) == "🎨 Creative IV"


def test_timestamps_use_discord_markup():
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    epoch = int(moment.timestamp())

    assert format_utils.full_timestamp(moment) == f"<t:{epoch}:F>"
    assert format_utils.long_date(moment) == f"<t:{epoch}:D>"


def test_truncate():
    assert format_utils.truncate("short", 10) == "short"
    assert format_utils.truncate("abcdefghij", 5) == "abcd…"
    assert len(format_utils.truncate("x" * 2000, 1024)) == 1024
