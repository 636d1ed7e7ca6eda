"""Display helpers shared by every view and export.

Names are only ever transformed for presentation; the stored ``mdpName`` is
never rewritten.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

PASSTHROUGH_NAMES = {"Anonymous", "N/A"}


def format_name(full_name: str | None) -> str | None:
    """Render ``"Jane Smith"`` as ``"Jane S."``; single tokens pass through."""
    if not full_name or full_name in PASSTHROUGH_NAMES:
        return full_name
    parts = full_name.split()
    if not parts:
        return full_name
    if len(parts) == 1:
        return parts[0]
    return f"{parts[0]} {parts[-1][0].upper()}."


def normalize_manager(name: str) -> str:
    return " ".join(token[:1].upper() + token[1:].lower() for token in name.split())


def round_half_up(value: float, places: int = 2) -> float:
    # Decimal(float) is exact; halves round away from zero.
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def to_fixed(value: float, places: int = 2) -> str:
    quantum = Decimal(1).scaleb(-places)
    result = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    if result.is_zero():
        result = abs(result)
    return str(result)


def signed(value: float, places: int = 2) -> str:
    text = to_fixed(value, places)
    return text if text.startswith("-") else f"+{text}"


def score_band(score: float) -> str:
    if score >= 4.0:
        return "high"
    if score >= 3.0:
        return "medium"
    return "low"
