"""
Shared calculation policies for automobile trip models.

These are the few formulas more than one committee relies on:

    harmonic_blend     — urbanity-weighted harmonic mean of city/highway rates
    during_timeframe   — full value inside the timeframe, exactly 0.0 outside
    fuel_volume        — distance / efficiency, rescaled for non-liquid fuels
    Drivetrain         — hybrid vs conventional multiplier selection

City and highway values are rates (km/h, km/l), and trip segments are
weighted by distance share, so they are blended harmonically.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from .domain import ABSENT, Timeframe, is_absent


# =============================================================================
# HARMONIC BLENDING
# =============================================================================

def harmonic_blend(urbanity: float, city: Optional[float], highway: Optional[float]) -> Any:
    """
    Weighted harmonic mean: 1 / (urbanity/city + (1 - urbanity)/highway).

    Returns ABSENT when either rate is unknown.
    """
    if is_absent(city) or is_absent(highway):
        return ABSENT
    return 1.0 / ((urbanity / city) + ((1.0 - urbanity) / highway))


# =============================================================================
# DRIVETRAIN
# =============================================================================

class Drivetrain(Enum):
    """Which set of size-class fuel efficiency multipliers applies."""
    HYBRID = "hybrid"
    CONVENTIONAL = "conventional"

    @classmethod
    def from_hybridity(cls, hybridity: Any) -> Drivetrain:
        return cls.HYBRID if hybridity is True else cls.CONVENTIONAL


@dataclass(frozen=True)
class DrivetrainMultipliers:
    """City and highway fuel efficiency multipliers for one drivetrain."""
    city: Optional[float] = None
    highway: Optional[float] = None

    @property
    def complete(self) -> bool:
        return self.city is not None and self.highway is not None

    def blend(self, urbanity: float) -> Any:
        return harmonic_blend(urbanity, self.city, self.highway)


# =============================================================================
# TIME-WINDOW GATING
# =============================================================================

def coerce_date(value: Any) -> date:
    """Accept a date, a datetime or an ISO-8601 string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def during_timeframe(value: float, day: Any, timeframe: Timeframe) -> float:
    """
    `value` if the trip date falls inside the timeframe, else exactly 0.0.

    Zero is a real answer ("happened outside the window"), not absence.
    """
    if timeframe.contains(coerce_date(day)):
        return float(value)
    return 0.0


# =============================================================================
# FUEL VOLUME
# =============================================================================

def fuel_volume(
    distance: float,
    fuel_efficiency: float,
    energy_content: Optional[float] = None,
    reference_energy_content: Optional[float] = None,
    non_liquid: bool = False,
) -> Any:
    """
    Fuel used over `distance` (km) at `fuel_efficiency` (km/l).

    For non-liquid fuels the efficiency is gasoline-equivalent, so the
    gasoline volume is rescaled by gasoline energy content over the actual
    fuel's energy content to land in the fuel's own units. Returns ABSENT
    when a non-liquid fuel is missing either energy content.
    """
    volume = distance / fuel_efficiency
    if non_liquid:
        if not energy_content or not reference_energy_content:
            return ABSENT
        volume = volume * reference_energy_content / energy_content
    return volume
