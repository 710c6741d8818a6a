import logging
from dataclasses import dataclass
from functools import lru_cache

import jax
import jax.numpy as jnp
import numpy as np
from jaxtyping import Array

from .column import Regime, StabilityCorrections
from .utils import KernelConstants, PhysicalConstants

logger = logging.getLogger(__name__)

cst = PhysicalConstants()
kcst = KernelConstants()

PSI_METHODS = ("table", "analytic")


@dataclass(frozen=True)
class SimilarityTable:
    """Tabulated unstable correction functions.

    Entry ``n`` holds the correction at the stability parameter ``-n * resolution``.
    """

    psim: np.ndarray
    """Momentum correction function [-]."""
    psih: np.ndarray
    """Heat correction function [-]."""
    resolution: float = 0.01
    """Spacing of the stability parameter [-]."""

    @property
    def size(self) -> int:
        return self.psim.shape[0]


def compute_psim_unstable(zeta: Array) -> Array:
    """Compute momentum stability function for unstable conditions.

    Args:
        zeta: stability parameter z/L :math:`\\zeta \\le 0`.

    Returns:
        Momentum stability correction [-].

    Notes:
        Based on Businger-Dyer relations, an intermediate variable

        .. math::
            x = (1 - 16\\zeta)^{1/4}

        is used to write the integrated stability function as

        .. math::
            \\Psi_m(\\zeta) = 2 \\ln\\left(\\frac{1+x}{2}\\right)
                             + \\ln\\left(\\frac{1+x^2}{2}\\right)
                             - 2 \\arctan(x) + \\frac{\\pi}{2}.
    """
    x = (1.0 - 16.0 * zeta) ** 0.25
    log_term = 2.0 * jnp.log(0.5 * (1.0 + x)) + jnp.log(0.5 * (1.0 + x * x))
    return log_term - 2.0 * jnp.arctan(x) + jnp.pi / 2.0


def compute_psih_unstable(zeta: Array) -> Array:
    """Compute scalar stability function for unstable conditions.

    Args:
        zeta: stability parameter z/L :math:`\\zeta \\le 0`.

    Returns:
        The scalar stability correction.

    Notes:
        With :math:`y = (1 - 16\\zeta)^{1/2}`, the integrated stability
        function is

        .. math::
            \\Psi_h(\\zeta) = 2 \\ln\\left( \\frac{1+y}{2} \\right).
    """
    y = (1.0 - 16.0 * zeta) ** 0.5
    return 2.0 * jnp.log(0.5 * (1.0 + y))


def build_similarity_table(
    size: int = 1001, resolution: float = 0.01
) -> SimilarityTable:
    """Tabulate the unstable correction functions down to z/L = -(size - 1) * resolution."""
    # evaluated eagerly even when first requested while tracing
    with jax.ensure_compile_time_eval():
        zeta = -resolution * jnp.arange(size)
        psim = np.array(compute_psim_unstable(zeta))
        psih = np.array(compute_psih_unstable(zeta))
    psim.flags.writeable = False
    psih.flags.writeable = False
    logger.debug("Built similarity table with %d entries", size)
    return SimilarityTable(psim=psim, psih=psih, resolution=resolution)


@lru_cache(maxsize=None)
def get_similarity_table() -> SimilarityTable:
    """Return the process-wide similarity table, building it on first use."""
    return build_similarity_table()


def interpolate_table(
    values: np.ndarray, zeta: Array, resolution: float = 0.01
) -> Array:
    """Linearly interpolate a tabulated correction function.

    Args:
        values: tabulated correction function.
        zeta: stability parameter, within the tabulated range.
        resolution: spacing of the table.

    Returns:
        The interpolated correction function.
    """
    scaled = jnp.abs(zeta) / resolution
    index = jnp.clip(jnp.floor(scaled).astype(jnp.int32), 0, values.shape[0] - 2)
    weight = scaled - index
    table = jnp.asarray(values)
    return table[index] + weight * (table[index + 1] - table[index])


def clamp_stability_parameter(zeta: Array) -> Array:
    """Clamp the stability parameter to the tabulated unstable range."""
    return jnp.clip(zeta, kcst.zol_min, kcst.zol_max)


def compute_stability_parameter(
    ust: Array,
    mol: Array,
    govrth: Array,
    hs: Array,
    rib_number: Array,
    gz1oz0: Array,
) -> tuple[Array, Array, Array]:
    """Compute the stability parameter at the three diagnostic heights.

    Args:
        ust: friction velocity :math:`u_*`.
        mol: temperature scale :math:`\\theta_*`.
        govrth: buoyancy parameter :math:`g/\\theta`.
        hs: height of the lowest model level :math:`z_a`.
        rib_number: bulk Richardson number :math:`Ri_b`.
        gz1oz0: :math:`\\ln(z_a/z_0)`.

    Returns:
        :math:`z_a/L`, :math:`10/L` and :math:`2/L`, each clamped to [-9.9999, 0].

    Notes:
        .. math::
            \\frac{z_a}{L} = \\frac{k g z_a \\theta_*}{\\theta u_*^2}

        For a friction velocity below 0.01 m/s the approximation
        :math:`z_a/L = Ri_b \\ln(z_a/z_0)` is used instead.
    """
    safe_ust = jnp.maximum(ust, kcst.ust_min)
    zol = jnp.where(
        ust < kcst.ust_min,
        rib_number * gz1oz0,
        cst.k * govrth * hs * mol / safe_ust**2.0,
    )
    zol = clamp_stability_parameter(zol)
    zol10 = clamp_stability_parameter(10.0 / hs * zol)
    zol2 = clamp_stability_parameter(2.0 / hs * zol)
    return zol, zol10, zol2


def scale_to_heights(psi: Array, hs: Array) -> tuple[Array, Array, Array]:
    """Scale a correction function by height ratio to 10m and 2m, each floored at -10."""
    psi = jnp.maximum(psi, kcst.psi_min)
    psi10 = jnp.maximum(10.0 / hs * psi, kcst.psi_min)
    psi2 = jnp.maximum(2.0 / hs * psi, kcst.psi_min)
    return psi, psi10, psi2


def stable_corrections(
    gz1oz0: Array, hs: Array, rib_number: Array
) -> StabilityCorrections:
    """Correction functions of the stable regime.

    The heat correction equals the momentum correction.
    """
    psim, psim10, psim2 = scale_to_heights(-10.0 * gz1oz0, hs)
    return StabilityCorrections(
        psim=psim,
        psih=psim,
        psim10=psim10,
        psih10=psim10,
        psim2=psim2,
        psih2=psim2,
        zol=rib_number * gz1oz0,
    )


def mechanical_corrections(
    gz1oz0: Array, hs: Array, rib_number: Array
) -> StabilityCorrections:
    """Correction functions of the damped mechanical turbulence regime.

    Notes:
        .. math::
            \\psi_m = \\psi_h = \\frac{-5 Ri_b \\ln(z_a/z_0)}{1.1 - 5 Ri_b}

        :math:`Ri_b` is clipped to [0, 0.2], the range of this regime, so a
        forced regime on a column outside it keeps the correction
        non-positive.
    """
    rib_number = jnp.clip(rib_number, 0.0, kcst.rib_stable)
    psi = -5.0 * rib_number * gz1oz0 / (1.1 - 5.0 * rib_number)
    psim, psim10, psim2 = scale_to_heights(psi, hs)
    return StabilityCorrections(
        psim=psim,
        psih=psim,
        psim10=psim10,
        psih10=psim10,
        psim2=psim2,
        psih2=psim2,
        zol=rib_number * gz1oz0,
    )


def forced_convection_corrections(gz1oz0: Array) -> StabilityCorrections:
    zero = jnp.zeros_like(gz1oz0)
    return StabilityCorrections(
        psim=zero,
        psih=zero,
        psim10=zero,
        psih10=zero,
        psim2=zero,
        psih2=zero,
        zol=zero,
    )


def evaluate_unstable(zeta: Array, method: str = "table") -> tuple[Array, Array]:
    """Evaluate the unstable momentum and heat corrections at a stability parameter.

    Args:
        zeta: stability parameter, clamped to [-9.9999, 0].
        method: ``"table"`` to interpolate the similarity table, ``"analytic"``
            to evaluate the integrated flux-profile relationships directly.

    Returns:
        The momentum and heat correction functions.
    """
    if method == "analytic":
        return compute_psim_unstable(zeta), compute_psih_unstable(zeta)
    table = get_similarity_table()
    return (
        interpolate_table(table.psim, zeta, table.resolution),
        interpolate_table(table.psih, zeta, table.resolution),
    )


def free_convection_corrections(
    gz1oz0: Array,
    gz10oz0: Array,
    gz2oz0: Array,
    zol: Array,
    zol10: Array,
    zol2: Array,
    method: str = "table",
) -> StabilityCorrections:
    """Correction functions of the free convection regime.

    Each correction is capped at 0.9 times its log term so that the
    integrated profile functions stay positive for thin layers over rough
    surfaces.
    """
    psim, psih = evaluate_unstable(zol, method)
    psim10, psih10 = evaluate_unstable(zol10, method)
    psim2, psih2 = evaluate_unstable(zol2, method)
    return StabilityCorrections(
        psim=jnp.minimum(psim, kcst.psi_cap * gz1oz0),
        psih=jnp.minimum(psih, kcst.psi_cap * gz1oz0),
        psim10=jnp.minimum(psim10, kcst.psi_cap * gz10oz0),
        psih10=jnp.minimum(psih10, kcst.psi_cap * gz10oz0),
        psim2=jnp.minimum(psim2, kcst.psi_cap * gz2oz0),
        psih2=jnp.minimum(psih2, kcst.psi_cap * gz2oz0),
        zol=zol,
    )


def compute_corrections(
    regime: Array,
    gz1oz0: Array,
    gz10oz0: Array,
    gz2oz0: Array,
    hs: Array,
    rib_number: Array,
    ust: Array,
    mol: Array,
    govrth: Array,
    method: str = "table",
) -> StabilityCorrections:
    """Compute the correction functions of the selected regime.

    Args:
        regime: regime code, see :class:`Regime`.
        gz1oz0: :math:`\\ln(z_a/z_0)`.
        gz10oz0: :math:`\\ln(10/z_0)`.
        gz2oz0: :math:`\\ln(2/z_0)`.
        hs: height of the lowest model level [m].
        rib_number: bulk Richardson number [-].
        ust: provisional friction velocity [m s-1].
        mol: temperature scale [K].
        govrth: buoyancy parameter [m s-2 K-1].
        method: evaluation of the unstable functions, ``"table"`` or ``"analytic"``.

    Returns:
        The correction functions at the lowest model level, 10m and 2m.

    Notes:
        All regimes are evaluated and exactly one is selected elementwise, so
        the function can be traced and vectorized.
    """
    zol, zol10, zol2 = compute_stability_parameter(
        ust, mol, govrth, hs, rib_number, gz1oz0
    )
    candidates = {
        Regime.STABLE: stable_corrections(gz1oz0, hs, rib_number),
        Regime.MECHANICAL: mechanical_corrections(gz1oz0, hs, rib_number),
        Regime.FORCED_CONVECTION: forced_convection_corrections(gz1oz0),
        Regime.FREE_CONVECTION: free_convection_corrections(
            gz1oz0, gz10oz0, gz2oz0, zol, zol10, zol2, method
        ),
    }
    conditions = [regime == int(case) for case in candidates]

    def select(*values):
        return jnp.select(conditions, values)

    return jax.tree_util.tree_map(select, *candidates.values())
