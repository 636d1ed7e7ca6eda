import pytest

from mdp_survey.services.formatting import (
    format_name,
    normalize_manager,
    round_half_up,
    score_band,
    signed,
    to_fixed,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Jane Smith", "Jane S."),
        ("Jane Mary smith", "Jane S."),
        ("  Jane   Smith ", "Jane S."),
        ("Cher", "Cher"),
        ("Anonymous", "Anonymous"),
        ("N/A", "N/A"),
        ("", ""),
        (None, None),
    ],
)
def test_format_name(raw, expected):
    assert format_name(raw) == expected


def test_normalize_manager_title_cases_each_word():
    assert normalize_manager("pat LEE") == "Pat Lee"
    assert normalize_manager("  ana   maria  ") == "Ana Maria"
    assert normalize_manager("") == ""


def test_round_half_up_matches_fixed_point_display():
    assert round_half_up(4.125) == 4.13
    assert round_half_up(4.375) == 4.38
    assert round_half_up(3.333333) == 3.33
    # 2.675 is stored just below the half.
    assert round_half_up(2.675) == 2.67


def test_to_fixed_pads_and_drops_negative_zero():
    assert to_fixed(4) == "4.00"
    assert to_fixed(3.25, 1) == "3.3"
    assert to_fixed(-0.001) == "0.00"


def test_signed_prefixes_non_negative_values():
    assert signed(0.3) == "+0.30"
    assert signed(0) == "+0.00"
    assert signed(-0.5) == "-0.50"


@pytest.mark.parametrize(
    ("score", "band"),
    [(5.0, "high"), (4.0, "high"), (3.99, "medium"), (3.0, "medium"), (2.99, "low"), (0.0, "low")],
)
def test_score_band_thresholds(score, band):
    assert score_band(score) == band
