from . import (
    convective_lsm,
    land_point,
    mechanical_turbulence,
    neutral,
    stable_night,
    water_point,
)

__all__ = [
    "convective_lsm",
    "land_point",
    "mechanical_turbulence",
    "neutral",
    "stable_night",
    "water_point",
]
