import jax.numpy as jnp
from jaxtyping import Array

from .column import ColumnState, Overrides, StabilityCorrections, SurfaceDiagnostics
from .preprocessing import Thermodynamics, is_water
from .regime import Classification, compute_friction_velocity
from .utils import KernelConstants, PhysicalConstants

cst = PhysicalConstants()
kcst = KernelConstants()


def compute_profile_functions(
    gz1oz0: Array,
    gz10oz0: Array,
    gz2oz0: Array,
    corrections: StabilityCorrections,
) -> tuple[Array, Array, Array, Array]:
    """Compute the integrated profile functions for momentum and heat.

    Args:
        gz1oz0: :math:`\\ln(z_a/z_0)`.
        gz10oz0: :math:`\\ln(10/z_0)`.
        gz2oz0: :math:`\\ln(2/z_0)`.
        corrections: stability correction functions.

    Returns:
        Momentum profile functions at the lowest model level and at 10m, heat
        profile functions at the lowest model level and at 2m.

    Notes:
        Each profile function is the log term minus the stability correction,
        e.g. :math:`\\ln(z_a/z_0) - \\psi_m`. The heat profile function at the
        lowest model level is floored at 2.
    """
    psix = gz1oz0 - corrections.psim
    psix10 = gz10oz0 - corrections.psim10
    psit = jnp.maximum(gz1oz0 - corrections.psih, kcst.psit_min)
    psit2 = gz2oz0 - corrections.psih2
    return psix, psix10, psit, psit2


def compute_moisture_profile_functions(
    ust: Array,
    hs: Array,
    zl: Array,
    psih: Array,
    psih2: Array,
) -> tuple[Array, Array]:
    """Compute the integrated profile functions for moisture.

    Notes:
        The log term accounts for the molecular diffusivity of water vapor
        :math:`\\kappa_a`,

        .. math::
            \\psi_q(z) = \\ln\\left(\\frac{k u_* z}{\\kappa_a} + \\frac{z}{z_l}\\right) - \\psi_h(z).
    """
    psiq = jnp.log(cst.k * ust * hs / cst.xka + hs / zl) - psih
    psiq2 = jnp.log(cst.k * ust * 2.0 / cst.xka + 2.0 / zl) - psih2
    return psiq, psiq2


def compute_water_roughness(ust: Array, z0: Array, ts: Array) -> Array:
    """Compute the thermal roughness length over water.

    Args:
        ust: friction velocity :math:`u_*`.
        z0: roughness length for momentum :math:`z_0`.
        ts: air temperature at the lowest model level [K].

    Returns:
        Roughness length for heat and moisture [m], bounded to [2e-9, 1e-4].

    Notes:
        With the kinematic viscosity of air
        :math:`\\nu = (1.32 + 0.009 (T - 273.15)) \\times 10^{-5}` and the
        roughness Reynolds number :math:`Re_* = u_* z_0 / \\nu`,

        .. math::
            z_{0t} = 5.5 \\times 10^{-5} Re_*^{-0.6}.
    """
    visc = (1.32 + 0.009 * (ts - cst.t0)) * 1.0e-5
    restar = ust * z0 / visc
    z0t = 5.5e-5 * restar**-0.6
    return jnp.clip(z0t, kcst.z0t_min, kcst.z0t_max)


def compute_water_profile_functions(
    height: Array | float, z0t: Array, psih: Array
) -> Array:
    """Compute a scalar profile function from the thermal roughness length, floored at 2."""
    return jnp.maximum(jnp.log((height + z0t) / z0t) - psih, kcst.psit_min)


def compute_10m_wind(
    us: Array, vs: Array, psix10: Array, psix: Array
) -> tuple[Array, Array]:
    """Compute the 10m wind components by scaling the lowest level wind."""
    ratio = psix10 / psix
    return us * ratio, vs * ratio


def compute_2m_temperature(
    thgb: Array,
    thx: Array,
    psit2: Array,
    psit: Array,
    psfc: Array,
) -> tuple[Array, Array]:
    """Compute 2m potential temperature and temperature.

    Notes:
        .. math::
            \\theta_{2m} = \\theta_g + (\\theta - \\theta_g) \\frac{\\psi_{t,2}}{\\psi_t},
            \\quad T_{2m} = \\theta_{2m} \\left(\\frac{p_s}{p_0}\\right)^{R_d/c_p}.
    """
    th2 = thgb + (thx - thgb) * psit2 / psit
    t2 = th2 * (psfc / cst.p0) ** cst.rovcp
    return th2, t2


def compute_2m_humidity(qsfc: Array, qs: Array, psiq2: Array, psiq: Array) -> Array:
    return qsfc + (qs - qsfc) * psiq2 / psiq


def compute_exchange_coefficients(
    ust: Array, psit2: Array, psiq2: Array, xland: Array
) -> tuple[Array, Array]:
    """Compute the 2m exchange coefficients for heat and moisture.

    Over land the heat coefficient equals the moisture coefficient.

    Returns:
        The heat and moisture exchange coefficients [m s-1].
    """
    cqs2 = cst.k * ust / psiq2
    chs2 = jnp.where(is_water(xland), cst.k * ust / psit2, cqs2)
    return chs2, cqs2


def apply_lsm_refinement(
    t2: Array,
    q2: Array,
    tg: Array,
    qsfc: Array,
    rho: Array,
    chs2: Array,
    cqs2: Array,
    hfx: Array | None = None,
    lh: Array | None = None,
) -> tuple[Array, Array]:
    """Recompute 2m temperature and humidity from the land surface model fluxes.

    Args:
        t2: interpolated 2m temperature [K].
        q2: interpolated 2m humidity [kg kg-1].
        tg: ground temperature [K].
        qsfc: ground humidity [kg kg-1].
        rho: near-surface air density [kg m-3].
        chs2: 2m exchange coefficient for heat [m s-1].
        cqs2: 2m exchange coefficient for moisture [m s-1].
        hfx: sensible heat flux [W m-2].
        lh: latent heat flux [W m-2].

    Returns:
        The 2m temperature and humidity.

    Notes:
        .. math::
            T_{2m} = T_g - \\frac{H}{\\rho c_p C_{h,2}},
            \\quad q_{2m} = q_g - \\frac{LE / L_v}{\\rho C_{q,2}}.

        Where an exchange coefficient is below 1e-5 m/s the ground value is
        used instead. A missing flux leaves the corresponding diagnostic
        unchanged.
    """
    if hfx is not None:
        flux_t2 = tg - hfx / (rho * cst.cp * jnp.maximum(chs2, kcst.exch_min))
        t2 = jnp.where(chs2 < kcst.exch_min, tg, flux_t2)
    if lh is not None:
        qfx = lh / cst.lv
        flux_q2 = qsfc - qfx / (rho * jnp.maximum(cqs2, kcst.exch_min))
        q2 = jnp.where(cqs2 < kcst.exch_min, qsfc, flux_q2)
    return t2, q2


def extrapolate(
    column: ColumnState,
    overrides: Overrides,
    thermo: Thermodynamics,
    classification: Classification,
    corrections: StabilityCorrections,
) -> SurfaceDiagnostics:
    """Extrapolate the lowest model level state to the diagnostic heights."""
    psix, psix10, psit, psit2 = compute_profile_functions(
        thermo.gz1oz0, thermo.gz10oz0, thermo.gz2oz0, corrections
    )
    ust = compute_friction_velocity(
        classification.wspd,
        thermo.gz1oz0,
        corrections.psim,
        ust_override=overrides.ust,
    )
    psiq, psiq2 = compute_moisture_profile_functions(
        ust, column.hs, thermo.zl, corrections.psih, corrections.psih2
    )

    # over water the scalar roughness follows the roughness Reynolds number
    z0t = compute_water_roughness(ust, thermo.z0, column.ts)
    water = is_water(column.xland)
    water_psit = compute_water_profile_functions(column.hs, z0t, corrections.psih)
    water_psit2 = compute_water_profile_functions(2.0, z0t, corrections.psih2)
    psit = jnp.where(water, water_psit, psit)
    psiq = jnp.where(water, water_psit, psiq)
    psit2 = jnp.where(water, water_psit2, psit2)
    psiq2 = jnp.where(water, water_psit2, psiq2)

    u10, v10 = compute_10m_wind(column.us, column.vs, psix10, psix)
    th2, t2 = compute_2m_temperature(
        thermo.thgb, thermo.thx, psit2, psit, column.psfc
    )
    q2 = compute_2m_humidity(thermo.qsfc, column.qs, psiq2, psiq)

    chs2, cqs2 = compute_exchange_coefficients(ust, psit2, psiq2, column.xland)
    if overrides.lsm:
        t2, q2 = apply_lsm_refinement(
            t2,
            q2,
            column.tg,
            thermo.qsfc,
            thermo.rho,
            chs2,
            cqs2,
            overrides.hfx,
            overrides.lh,
        )

    return SurfaceDiagnostics(
        regime=classification.regime,
        u10=u10,
        v10=v10,
        t2=t2,
        q2=q2,
        th2=th2,
        ust=ust,
        mol=classification.mol,
        rib_number=classification.rib_number,
        chs2=chs2,
        cqs2=cqs2,
        corrections=corrections,
    )
