from typing import Callable

import jax.numpy as jnp
from jaxtyping import Array

SaturationFn = Callable[[Array, Array], tuple[Array, Array]]


class PhysicalConstants:
    """Container for physical constants used throughout the model."""

    def __init__(self):
        # 1. thermodynamic constants:
        # gravity acceleration [m s-2]
        self.g = 9.81
        # gas constant for dry air [J kg-1 K-1]
        self.rd = 287.0
        # gas constant for water vapor [J kg-1 K-1]
        self.rv = 461.6
        # specific heat of dry air [J kg-1 K-1]
        self.cp = 7.0 * self.rd / 2.0
        # heat of vaporization [J kg-1]
        self.lv = 2.5e6
        # exponent of the potential temperature [-]
        self.rovcp = self.rd / self.cp
        # virtual temperature factor [-]
        self.ep1 = self.rv / self.rd - 1.0
        # ratio of molecular weights of water and dry air [-]
        self.ep2 = self.rd / self.rv
        # reference pressure for potential temperature [Pa]
        self.p0 = 1.0e5

        # 2. physical constants:
        # von Karman constant [-]
        self.k = 0.4
        # molecular diffusivity of water vapor [m2 s-1]
        self.xka = 2.4e-5
        # freezing point [K]
        self.t0 = 273.15


class KernelConstants:
    """Bounds and tuning parameters of the surface diagnostics kernel."""

    def __init__(self):
        # 1. roughness:
        # minimum roughness length for momentum [m]
        self.z0_min = 1.0e-4
        # roughness length for moisture over land [m]
        self.zl_land = 0.01
        # land/water threshold of the land mask [-]
        self.water_threshold = 1.5
        # bounds of the thermal roughness length over water [m]
        self.z0t_min = 2.0e-9
        self.z0t_max = 1.0e-4

        # 2. velocity scales:
        # minimum wind speed [m s-1]
        self.wspd_min = 0.1
        # convective velocity coefficient [-]
        self.vconvc = 1.0
        # grid spacing above which subgrid wind is added [m]
        self.dx_ref = 5000.0
        # subgrid wind coefficient [m s-1]
        self.vsgd_coef = 0.32
        # friction velocity below which z/L falls back to Ri [m s-1]
        self.ust_min = 0.01

        # 3. stability:
        # Richardson number of the stable regime [-]
        self.rib_stable = 0.2
        # bounds of the stability parameter z/L [-]
        self.zol_min = -9.9999
        self.zol_max = 0.0
        # lower limit of the stable correction functions [-]
        self.psi_min = -10.0
        # maximum fraction of the log term taken by unstable corrections [-]
        self.psi_cap = 0.9
        # minimum of the integrated scalar profile functions [-]
        self.psit_min = 2.0
        # minimum 2m exchange coefficient [m s-1]
        self.exch_min = 1.0e-5


def compute_esat(temp: Array) -> Array:
    """Compute saturation vapor pressure [Pa] from temperature [K].

    Uses the Tetens formula over liquid water.
    """
    return 611.2 * jnp.exp(17.67 * (temp - 273.15) / (temp - 29.65))


def compute_qsat(temp: Array, pressure: Array) -> Array:
    """Compute saturation specific humidity [kg kg-1]."""
    esat = compute_esat(temp)
    return 0.622 * esat / (pressure - 0.378 * esat)


def compute_saturation(temp: Array, pressure: Array) -> tuple[Array, Array]:
    """Compute saturation vapor pressure and saturation specific humidity.

    Args:
        temp: temperature [K].
        pressure: pressure [Pa].

    Returns:
        Saturation vapor pressure [Pa] and saturation specific humidity [kg kg-1].
    """
    return compute_esat(temp), compute_qsat(temp, pressure)
