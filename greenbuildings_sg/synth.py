import math
from typing import List, Optional

import numpy as np


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _in_range(rng: np.random.Generator, lo: float, span: float) -> int:
    return round_half_up(lo + rng.random() * span)


# rating -> (low, span)
ENERGY_INTENSITY_RANGES = {
    "Platinum": (80, 25),    # 80-105
    "GoldPLUS": (100, 25),   # 100-125
    "Gold": (145, 35),       # 145-180
    "Certified": (160, 25),  # 160-185
}
ENERGY_INTENSITY_DEFAULT = (150, 40)

FLOOR_AREA_RANGES = {
    "Office": (10000, 60000),
    "Retail": (30000, 90000),
    "Industrial": (20000, 100000),
    "Data Centre": (30000, 80000),
}
FLOOR_AREA_DEFAULT = (15000, 60000)

CARBON_SAVINGS_RANGES = {
    "Platinum": (40, 12),
    "GoldPLUS": (30, 10),
    "Gold": (20, 10),
    "Certified": (10, 10),
}
CARBON_SAVINGS_DEFAULT = (15, 15)

AMENITIES = {
    "Office": ["Direct MRT Access", "Parking", "F&B"],
    "Retail": ["Direct MRT Access", "Parking", "F&B", "Entertainment"],
    "Industrial": ["Parking", "Loading Bay"],
    "Data Centre": ["Backup Power", "Security", "Cooling Systems"],
}
AMENITIES_DEFAULT = ["Parking", "F&B"]


def synth_energy_intensity(rating: str, rng: np.random.Generator) -> int:
    lo, span = ENERGY_INTENSITY_RANGES.get(rating, ENERGY_INTENSITY_DEFAULT)
    return _in_range(rng, lo, span)


def synth_floor_area(building_type: str, fallback: Optional[float], rng: np.random.Generator):
    """
    Keep a usable GFA from the source row, otherwise draw one by building type.
    """
    if fallback is not None and math.isfinite(fallback) and fallback > 0:
        return int(fallback) if float(fallback).is_integer() else float(fallback)
    lo, span = FLOOR_AREA_RANGES.get(building_type, FLOOR_AREA_DEFAULT)
    return _in_range(rng, lo, span)


def synth_carbon_savings(rating: str, rng: np.random.Generator) -> int:
    lo, span = CARBON_SAVINGS_RANGES.get(rating, CARBON_SAVINGS_DEFAULT)
    return _in_range(rng, lo, span)


def synth_occupancy_rate(rng: np.random.Generator) -> int:
    return _in_range(rng, 80, 15)


def synth_year_built(rng: np.random.Generator) -> int:
    return 1995 + int(math.floor(rng.random() * 30))


def amenities_for_type(building_type: str) -> List[str]:
    return list(AMENITIES.get(building_type, AMENITIES_DEFAULT))


def estimated_monthly_cost(energy_intensity: float, total_floor_area: float) -> int:
    # each term rounded on its own, then summed
    electricity = round_half_up((energy_intensity * total_floor_area / 12) * 0.25)
    rental = round_half_up(total_floor_area * 10)
    return electricity + rental


def parse_gfa(raw) -> Optional[float]:
    """'12,345.6' -> 12345.6; blanks and junk -> None"""
    s = str(raw if raw is not None else "").replace(",", "").strip()
    if not s:
        return None
    try:
        v = float(s)
    except ValueError:
        return None
    return v if math.isfinite(v) else None
