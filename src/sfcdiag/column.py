"""States exchanged with the host model: column inputs, overrides and diagnostics."""

from dataclasses import dataclass
from enum import IntEnum

from jaxtyping import Array
from simple_pytree import static_field

from .abstracts import AbstractState


class Regime(IntEnum):
    """Stability regime of the surface layer."""

    STABLE = 1
    """Stable nighttime conditions, Ri >= 0.2."""
    MECHANICAL = 2
    """Damped mechanical turbulence, 0 < Ri < 0.2."""
    FORCED_CONVECTION = 3
    """Forced convection, Ri = 0."""
    FREE_CONVECTION = 4
    """Free convection, Ri < 0."""


@dataclass
class ColumnState(AbstractState):
    """Lowest model level and surface state of a single column."""

    psfc: Array
    """Surface pressure [Pa]."""
    tg: Array
    """Ground (skin) temperature [K]."""
    ps: Array
    """Pressure at the lowest model level [Pa]."""
    ts: Array
    """Temperature at the lowest model level [K]."""
    qs: Array
    """Specific humidity at the lowest model level [kg kg-1]."""
    us: Array
    """Zonal wind at the lowest model level [m s-1]."""
    vs: Array
    """Meridional wind at the lowest model level [m s-1]."""
    hs: Array
    """Height of the lowest model level above ground [m]."""
    znt: Array
    """Roughness length for momentum [m]."""
    xland: Array
    """Land mask, 1 for land and 2 for water [-]."""
    dx: Array
    """Horizontal grid spacing [m]."""


@dataclass
class Overrides(AbstractState):
    """Values supplied by the host model which replace internally derived ones.

    A field left as ``None`` is absent. Roughness, surface humidity, friction
    velocity and regime only replace the internal value when positive; the
    remaining fields are used whenever present.
    """

    regime: Array | None = None
    """Externally computed regime code [-]."""
    qsfc: Array | None = None
    """Surface specific humidity [kg kg-1]."""
    znt: Array | None = None
    """Roughness length for momentum [m]."""
    ust: Array | None = None
    """Friction velocity [m s-1]."""
    mol: Array | None = None
    """Temperature scale of the previous step [K]."""
    hfx: Array | None = None
    """Sensible heat flux [W m-2]."""
    lh: Array | None = None
    """Latent heat flux [W m-2]."""
    pblh: Array | None = None
    """Boundary layer height [m]."""
    lsm: bool = static_field(default=False)
    """Whether 2m diagnostics are refined with the land surface model fluxes."""


@dataclass
class StabilityCorrections(AbstractState):
    """Integrated stability correction functions at the three diagnostic heights."""

    psim: Array
    """Momentum correction at the lowest model level [-]."""
    psih: Array
    """Heat correction at the lowest model level [-]."""
    psim10: Array
    """Momentum correction at 10m [-]."""
    psih10: Array
    """Heat correction at 10m [-]."""
    psim2: Array
    """Momentum correction at 2m [-]."""
    psih2: Array
    """Heat correction at 2m [-]."""
    zol: Array
    """Stability parameter z/L at the lowest model level [-]."""


@dataclass
class SurfaceDiagnostics(AbstractState):
    """Near-surface diagnostics of a single column."""

    regime: Array
    """Stability regime code, see :class:`Regime` [-]."""
    u10: Array
    """10m zonal wind [m s-1]."""
    v10: Array
    """10m meridional wind [m s-1]."""
    t2: Array
    """2m temperature [K]."""
    q2: Array
    """2m specific humidity [kg kg-1]."""
    th2: Array
    """2m potential temperature [K]."""
    ust: Array
    """Friction velocity [m s-1]."""
    mol: Array
    """Temperature scale [K]."""
    rib_number: Array
    """Bulk Richardson number [-]."""
    chs2: Array
    """2m exchange coefficient for heat [m s-1]."""
    cqs2: Array
    """2m exchange coefficient for moisture [m s-1]."""
    corrections: StabilityCorrections
    """Stability correction functions of the selected regime."""

    @property
    def regime_case(self) -> Regime:
        """The regime as a :class:`Regime` member.

        Only defined for a single column; diagnostics batched with ``vmap``
        hold an array of codes, read them from :attr:`regime` instead.
        """
        return Regime(int(self.regime))
