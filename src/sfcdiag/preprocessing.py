from dataclasses import dataclass

import jax.numpy as jnp
from jaxtyping import Array

from .abstracts import AbstractState
from .column import ColumnState, Overrides
from .utils import KernelConstants, PhysicalConstants, SaturationFn

cst = PhysicalConstants()
kcst = KernelConstants()


@dataclass
class Thermodynamics(AbstractState):
    """Roughness lengths and thermodynamic state derived from a column."""

    z0: Array
    """Roughness length for momentum [m]."""
    zl: Array
    """Roughness length for moisture [m]."""
    gz1oz0: Array
    """Log of the lowest model level height over the roughness length [-]."""
    gz10oz0: Array
    """Log of 10m over the roughness length [-]."""
    gz2oz0: Array
    """Log of 2m over the roughness length [-]."""
    thx: Array
    """Potential temperature at the lowest model level [K]."""
    thgb: Array
    """Ground potential temperature [K]."""
    tvx: Array
    """Virtual temperature at the lowest model level [K]."""
    thvx: Array
    """Virtual potential temperature at the lowest model level [K]."""
    tskv: Array
    """Ground virtual potential temperature [K]."""
    qsfc: Array
    """Ground humidity [kg kg-1]."""
    govrth: Array
    """Buoyancy parameter g / thx [m s-2 K-1]."""
    rho: Array
    """Near-surface air density [kg m-3]."""


def is_water(xland: Array) -> Array:
    """Whether the land mask denotes a water point."""
    return xland - kcst.water_threshold >= 0.0


def override_if_positive(value: Array, override: Array | None) -> Array:
    """Replace ``value`` by ``override`` when the latter is present and positive."""
    if override is None:
        return value
    return jnp.where(override > 0.0, override, value)


def compute_roughness(znt: Array, znt_override: Array | None = None) -> Array:
    """Compute the roughness length for momentum.

    Args:
        znt: roughness length from the column [m].
        znt_override: externally supplied roughness length [m].

    Returns:
        Roughness length [m], never below 1e-4 m.
    """
    z0 = override_if_positive(znt, znt_override)
    return jnp.maximum(z0, kcst.z0_min)


def compute_moisture_roughness(z0: Array, xland: Array) -> Array:
    """Compute the roughness length for moisture.

    Water points use the momentum roughness length, land points a fixed 0.01 m.
    """
    return jnp.where(is_water(xland), z0, kcst.zl_land)


def compute_log_ratios(hs: Array, z0: Array) -> tuple[Array, Array, Array]:
    """Compute log-ratios of the diagnostic heights to the roughness length.

    Args:
        hs: height of the lowest model level :math:`z_a`.
        z0: roughness length for momentum :math:`z_0`.

    Returns:
        :math:`\\ln(z_a/z_0)`, :math:`\\ln(10/z_0)` and :math:`\\ln(2/z_0)`.
    """
    return jnp.log(hs / z0), jnp.log(10.0 / z0), jnp.log(2.0 / z0)


def compute_potential_temperature(temp: Array, pressure: Array) -> Array:
    """Compute potential temperature.

    Args:
        temp: temperature :math:`T`.
        pressure: pressure :math:`p`.

    Returns:
        Potential temperature :math:`\\theta`.

    Notes:
        The potential temperature is given by

        .. math::
            \\theta = T \\left(\\frac{p_0}{p}\\right)^{R_d/c_p}

        with :math:`p_0 = 10^5` Pa.
    """
    return temp * (cst.p0 / pressure) ** cst.rovcp


def compute_virtual(value: Array, q: Array) -> Array:
    """Apply the virtual temperature correction to a (potential) temperature.

    Notes:
        .. math::
            T_v = T (1 + \\epsilon_1 q)

        where :math:`\\epsilon_1 = R_v/R_d - 1`.
    """
    return value * (1.0 + cst.ep1 * q)


def compute_air_density(psfc: Array, tvx: Array) -> Array:
    """Compute near-surface air density [kg m-3] from the ideal gas law."""
    return psfc / (cst.rd * tvx)


def compute_ground_humidity(
    tg: Array,
    psfc: Array,
    saturation_fn: SaturationFn,
    qsfc_override: Array | None = None,
) -> Array:
    """Compute ground humidity from saturation at the ground temperature.

    Args:
        tg: ground temperature [K].
        psfc: surface pressure [Pa].
        saturation_fn: function returning saturation vapor pressure and
            saturation specific humidity from temperature and pressure.
        qsfc_override: externally supplied surface humidity [kg kg-1].

    Returns:
        Ground humidity [kg kg-1].

    Notes:
        Only the vapor pressure of the saturation function is used, converted
        to a mixing ratio

        .. math::
            q_g = \\frac{\\epsilon_2 e_s(T_g)}{p_s - e_s(T_g)}.
    """
    esat, _ = saturation_fn(tg, psfc)
    qsfc = cst.ep2 * esat / (psfc - esat)
    return override_if_positive(qsfc, qsfc_override)


def preprocess(
    column: ColumnState,
    overrides: Overrides,
    saturation_fn: SaturationFn,
) -> Thermodynamics:
    """Derive roughness lengths and the thermodynamic state of a column."""
    z0 = compute_roughness(column.znt, overrides.znt)
    zl = compute_moisture_roughness(z0, column.xland)
    gz1oz0, gz10oz0, gz2oz0 = compute_log_ratios(column.hs, z0)

    thx = compute_potential_temperature(column.ts, column.ps)
    thgb = compute_potential_temperature(column.tg, column.psfc)
    qsfc = compute_ground_humidity(
        column.tg, column.psfc, saturation_fn, overrides.qsfc
    )

    tvx = compute_virtual(column.ts, column.qs)

    return Thermodynamics(
        z0=z0,
        zl=zl,
        gz1oz0=gz1oz0,
        gz10oz0=gz10oz0,
        gz2oz0=gz2oz0,
        thx=thx,
        thgb=thgb,
        tvx=tvx,
        thvx=compute_virtual(thx, column.qs),
        tskv=compute_virtual(thgb, qsfc),
        qsfc=qsfc,
        govrth=cst.g / thx,
        rho=compute_air_density(column.psfc, tvx),
    )
