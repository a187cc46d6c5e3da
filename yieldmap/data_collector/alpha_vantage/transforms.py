"""
Field transforms applied to raw fundamentals payloads
"""

import math
from typing import Any, Dict, FrozenSet

UNKNOWN_SECTOR = "Unknown"

# Raw sector label (lower-case) -> translated category.
# "basic materials" maps to Manufacturing; nothing maps to Agriculture.
SECTOR_TRANSLATIONS: Dict[str, str] = {
    "technology": "Manufacturing",
    "industrials": "Manufacturing",
    "basic materials": "Manufacturing",
    "healthcare": "Services",
    "financial services": "Services",
    "communication services": "Services",
    "consumer cyclical": "Retail",
    "consumer defensive": "Retail",
    "real estate": "Property",
    "utilities": "Energy",
    "energy": "Energy",
}

SECTOR_LABELS: FrozenSet[str] = frozenset(
    {"Manufacturing", "Services", "Agriculture", "Retail", "Property", "Energy"}
)

# Placeholders the API returns instead of a number
_YIELD_SENTINELS = frozenset({"", "none", "-"})


def translate_sector(raw: Any) -> str:
    """Map a raw sector label to the closed taxonomy; never raises."""
    if not isinstance(raw, str):
        return UNKNOWN_SECTOR
    return SECTOR_TRANSLATIONS.get(raw.strip().lower(), UNKNOWN_SECTOR)


def parse_dividend_yield(raw: Any) -> float:
    """Convert the API's fractional yield (``"0.05"``) to a percentage (``5.0``).

    Sentinels, unparseable, non-finite and negative values become 0.0.
    """
    if raw is None:
        return 0.0
    if isinstance(raw, str) and raw.strip().lower() in _YIELD_SENTINELS:
        return 0.0
    try:
        fraction = float(raw)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(fraction) or fraction <= 0:
        return 0.0
    return fraction * 100
