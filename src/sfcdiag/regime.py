from dataclasses import dataclass

import jax.numpy as jnp
from jaxtyping import Array

from .abstracts import AbstractState
from .column import ColumnState, Overrides, Regime
from .preprocessing import Thermodynamics, is_water, override_if_positive
from .utils import KernelConstants, PhysicalConstants

cst = PhysicalConstants()
kcst = KernelConstants()


@dataclass
class Classification(AbstractState):
    """Velocity scales, stability and provisional turbulent scales of a column."""

    wspd: Array
    """Effective wind speed [m s-1]."""
    rib_number: Array
    """Bulk Richardson number [-]."""
    regime: Array
    """Stability regime code [-]."""
    ust: Array
    """Provisional friction velocity [m s-1]."""
    mol: Array
    """Temperature scale [K]."""


def compute_wind_speed_squared(us: Array, vs: Array) -> Array:
    """Compute the squared horizontal wind speed [m2 s-2]."""
    return us**2.0 + vs**2.0


def compute_convective_velocity_squared(
    thvx: Array,
    tskv: Array,
    tg: Array,
    rho: Array,
    xland: Array,
    hfx: Array | None = None,
    lh: Array | None = None,
    pblh: Array | None = None,
) -> Array:
    """Compute the squared convective velocity scale.

    Args:
        thvx: virtual potential temperature at the lowest model level :math:`\\theta_{v}`.
        tskv: ground virtual potential temperature :math:`\\theta_{v,g}`.
        tg: ground temperature :math:`T_g`.
        rho: near-surface air density :math:`\\rho`.
        xland: land mask.
        hfx: sensible heat flux :math:`H`.
        lh: latent heat flux :math:`LE`.
        pblh: boundary layer height :math:`h`.

    Returns:
        Squared convective velocity :math:`V_c^2` [m2 s-2].

    Notes:
        By default the convective velocity is the square root of the
        virtual potential temperature excess of the ground,

        .. math::
            V_c^2 = \\max(\\theta_{v,g} - \\theta_v, 0).

        Over land, when both fluxes and a positive boundary layer height are
        available, the flux-based scale of Beljaars (1995) is used instead

        .. math::
            V_c = \\beta \\left(\\frac{g}{T_g} h F_c\\right)^{0.33},
            \\quad F_c = \\max\\left(\\frac{H}{\\rho c_p}
            + \\epsilon_1 \\theta_{v,g} \\frac{LE}{\\rho L_v}, 0\\right).
    """
    vconv2 = jnp.maximum(tskv - thvx, 0.0)
    if hfx is None or lh is None or pblh is None:
        return vconv2

    qfx = lh / cst.lv
    fluxc = jnp.maximum(hfx / rho / cst.cp + cst.ep1 * tskv * qfx / rho, 0.0)
    vconv = kcst.vconvc * (cst.g / tg * jnp.maximum(pblh, 0.0) * fluxc) ** 0.33
    use_flux = jnp.logical_and(jnp.logical_not(is_water(xland)), pblh > 0.0)
    return jnp.where(use_flux, vconv**2.0, vconv2)


def compute_subgrid_velocity_squared(dx: Array) -> Array:
    """Compute the squared subgrid velocity of coarse grids.

    Notes:
        Following Mahrt and Sun (1995), the unresolved mesoscale wind is

        .. math::
            V_{sg} = 0.32 \\max\\left(\\frac{\\Delta x}{5000} - 1, 0\\right)^{0.33},

        which vanishes for grid spacings up to 5 km.
    """
    excess = jnp.maximum(dx / kcst.dx_ref - 1.0, 0.0)
    vsgd = kcst.vsgd_coef * excess**0.33
    return vsgd**2.0


def compute_effective_wind_speed(wspd2: Array, vconv2: Array, vsgd2: Array) -> Array:
    """Compute the effective wind speed.

    A minimum value of 0.1 m/s is enforced so that the Richardson number stays
    finite for calm columns.
    """
    return jnp.maximum(jnp.sqrt(wspd2 + vconv2 + vsgd2), kcst.wspd_min)


def compute_richardson_number(
    govrth: Array,
    hs: Array,
    thvx: Array,
    tskv: Array,
    wspd: Array,
    mol_override: Array | None = None,
) -> Array:
    """Compute bulk Richardson number.

    Args:
        govrth: buoyancy parameter :math:`g/\\theta`.
        hs: height of the lowest model level :math:`z_a`.
        thvx: virtual potential temperature at the lowest model level :math:`\\theta_v`.
        tskv: ground virtual potential temperature :math:`\\theta_{v,g}`.
        wspd: effective wind speed :math:`U`.
        mol_override: temperature scale of the previous step.

    Returns:
        The bulk Richardson number :math:`Ri_b`.

    Notes:
        The bulk Richardson number is given by

        .. math::
            Ri_b = \\frac{g}{\\theta} \\frac{z_a (\\theta_v - \\theta_{v,g})}{U^2}.

        A column that was unstable at the previous step (negative temperature
        scale) is kept out of the stable regimes by capping :math:`Ri_b` at 0.
    """
    rib_number = govrth * hs * (thvx - tskv) / wspd**2.0
    if mol_override is None:
        return rib_number
    return jnp.where(mol_override < 0.0, jnp.minimum(rib_number, 0.0), rib_number)


def classify_regime(rib_number: Array, regime_override: Array | None = None) -> Array:
    """Classify the stability regime from the bulk Richardson number.

    Args:
        rib_number: bulk Richardson number.
        regime_override: externally computed regime code. Fractional codes
            (e.g. 4.1) are rounded to the nearest regime.

    Returns:
        The regime code as an integer array, see :class:`Regime`.
    """
    regime = jnp.select(
        [rib_number >= kcst.rib_stable, rib_number > 0.0, rib_number == 0.0],
        [
            int(Regime.STABLE),
            int(Regime.MECHANICAL),
            int(Regime.FORCED_CONVECTION),
        ],
        int(Regime.FREE_CONVECTION),
    )
    if regime_override is not None:
        code = jnp.clip(
            jnp.floor(regime_override + 0.5),
            int(Regime.STABLE),
            int(Regime.FREE_CONVECTION),
        )
        regime = jnp.where(regime_override > 0.0, code, regime)
    return jnp.asarray(regime, dtype=jnp.int32)


def compute_friction_velocity(
    wspd: Array,
    gz1oz0: Array,
    psim: Array | float = 0.0,
    ust_override: Array | None = None,
) -> Array:
    """Compute friction velocity from the log wind profile.

    Notes:
        .. math::
            u_* = \\frac{k U}{\\ln(z_a/z_0) - \\psi_m}
    """
    ust = cst.k * wspd / (gz1oz0 - psim)
    return override_if_positive(ust, ust_override)


def compute_temperature_scale(
    thx: Array,
    thgb: Array,
    gz1oz0: Array,
    psih: Array | float = 0.0,
    mol_override: Array | None = None,
) -> Array:
    """Compute the surface layer temperature scale.

    Notes:
        .. math::
            \\theta_* = \\frac{k (\\theta - \\theta_g)}{\\ln(z_a/z_0) - \\psi_h}
    """
    if mol_override is not None:
        return jnp.asarray(mol_override)
    return cst.k * (thx - thgb) / (gz1oz0 - psih)


def classify(
    column: ColumnState, overrides: Overrides, thermo: Thermodynamics
) -> Classification:
    """Compute velocity scales and the stability regime of a column.

    The friction velocity and temperature scale are first estimates that
    ignore stability; the friction velocity is refined once the correction
    functions of the selected regime are known.
    """
    wspd2 = compute_wind_speed_squared(column.us, column.vs)
    vconv2 = compute_convective_velocity_squared(
        thermo.thvx,
        thermo.tskv,
        column.tg,
        thermo.rho,
        column.xland,
        overrides.hfx,
        overrides.lh,
        overrides.pblh,
    )
    vsgd2 = compute_subgrid_velocity_squared(column.dx)
    wspd = compute_effective_wind_speed(wspd2, vconv2, vsgd2)

    rib_number = compute_richardson_number(
        thermo.govrth, column.hs, thermo.thvx, thermo.tskv, wspd, overrides.mol
    )
    regime = classify_regime(rib_number, overrides.regime)

    ust = compute_friction_velocity(wspd, thermo.gz1oz0, ust_override=overrides.ust)
    mol = compute_temperature_scale(
        thermo.thx, thermo.thgb, thermo.gz1oz0, mol_override=overrides.mol
    )
    return Classification(
        wspd=wspd,
        rib_number=rib_number,
        regime=regime,
        ust=ust,
        mol=mol,
    )
