import logging

import jax.numpy as jnp

from .abstracts import AbstractModel
from .column import ColumnState, Overrides, SurfaceDiagnostics
from .extrapolation import extrapolate
from .preprocessing import preprocess
from .regime import classify
from .similarity import PSI_METHODS, compute_corrections, get_similarity_table
from .utils import SaturationFn, compute_saturation

logger = logging.getLogger(__name__)


class SurfaceDiagnosticsModel(AbstractModel[SurfaceDiagnostics]):
    """Near-surface diagnostics from Monin-Obukhov similarity theory.

    Computes 10m wind, 2m temperature and 2m specific humidity of a single
    column from its lowest model level, following the stability regimes of
    the MM5 surface layer scheme.
    """

    def __init__(
        self,
        psi_method: str = "table",
        saturation_fn: SaturationFn = compute_saturation,
    ):
        """Initialize the model.

        Args:
            psi_method: evaluation of the unstable correction functions, either
                ``"table"`` (interpolated look-up table) or ``"analytic"``.
                Default is ``"table"``.
            saturation_fn: function of temperature [K] and pressure [Pa]
                returning saturation vapor pressure [Pa] and saturation
                specific humidity [kg kg-1].
        """
        if psi_method not in PSI_METHODS:
            raise ValueError(f'Invalid option "{psi_method}" for "psi_method".')
        self.psi_method = psi_method
        self.saturation_fn = saturation_fn
        if psi_method == "table":
            # built before the model is shared between threads
            get_similarity_table()
        logger.debug("Initialized surface diagnostics with psi_method=%s", psi_method)

    def init_column(
        self,
        psfc: float,
        tg: float,
        ps: float,
        ts: float,
        qs: float,
        us: float,
        vs: float,
        hs: float,
        znt: float,
        xland: float,
        dx: float,
    ) -> ColumnState:
        """Initialize the column state.

        Args:
            psfc: surface pressure [Pa].
            tg: ground temperature [K].
            ps: pressure at the lowest model level [Pa].
            ts: temperature at the lowest model level [K].
            qs: specific humidity at the lowest model level [kg kg-1].
            us: zonal wind at the lowest model level [m s-1].
            vs: meridional wind at the lowest model level [m s-1].
            hs: height of the lowest model level [m].
            znt: roughness length [m].
            xland: land mask, 1 for land and 2 for water [-].
            dx: horizontal grid spacing [m].

        Returns:
            The column state.
        """
        return ColumnState(
            psfc=jnp.array(psfc, dtype=float),
            tg=jnp.array(tg, dtype=float),
            ps=jnp.array(ps, dtype=float),
            ts=jnp.array(ts, dtype=float),
            qs=jnp.array(qs, dtype=float),
            us=jnp.array(us, dtype=float),
            vs=jnp.array(vs, dtype=float),
            hs=jnp.array(hs, dtype=float),
            znt=jnp.array(znt, dtype=float),
            xland=jnp.array(xland, dtype=float),
            dx=jnp.array(dx, dtype=float),
        )

    def init_overrides(
        self,
        lsm: bool = False,
        regime: float | None = None,
        qsfc: float | None = None,
        znt: float | None = None,
        ust: float | None = None,
        mol: float | None = None,
        hfx: float | None = None,
        lh: float | None = None,
        pblh: float | None = None,
    ) -> Overrides:
        """Initialize the overrides, see :class:`Overrides` for the fields."""

        def as_array(value):
            return None if value is None else jnp.array(value, dtype=float)

        return Overrides(
            regime=as_array(regime),
            qsfc=as_array(qsfc),
            znt=as_array(znt),
            ust=as_array(ust),
            mol=as_array(mol),
            hfx=as_array(hfx),
            lh=as_array(lh),
            pblh=as_array(pblh),
            lsm=lsm,
        )

    def run(
        self,
        column: ColumnState,
        overrides: Overrides | None = None,
    ) -> SurfaceDiagnostics:
        """Run the model.

        Args:
            column: the column state.
            overrides: optional values replacing internally derived ones.

        Returns:
            The surface diagnostics.
        """
        if overrides is None:
            overrides = Overrides()
        thermo = preprocess(column, overrides, self.saturation_fn)
        classification = classify(column, overrides, thermo)
        corrections = compute_corrections(
            classification.regime,
            thermo.gz1oz0,
            thermo.gz10oz0,
            thermo.gz2oz0,
            column.hs,
            classification.rib_number,
            classification.ust,
            classification.mol,
            thermo.govrth,
            method=self.psi_method,
        )
        return extrapolate(column, overrides, thermo, classification, corrections)


def compute_surface_diagnostics(
    psfc: float,
    tg: float,
    ps: float,
    ts: float,
    qs: float,
    us: float,
    vs: float,
    hs: float,
    znt: float,
    xland: float,
    dx: float,
    *,
    lsm: bool = False,
    regime: float | None = None,
    qsfc: float | None = None,
    znt_override: float | None = None,
    ust: float | None = None,
    mol: float | None = None,
    hfx: float | None = None,
    lh: float | None = None,
    pblh: float | None = None,
    psi_method: str = "table",
) -> SurfaceDiagnostics:
    """Compute the surface diagnostics of a single column.

    Convenience wrapper building a :class:`SurfaceDiagnosticsModel` and its
    states from scalars. Units are Pa, K, kg kg-1, m s-1 and m.
    """
    model = SurfaceDiagnosticsModel(psi_method=psi_method)
    column = model.init_column(psfc, tg, ps, ts, qs, us, vs, hs, znt, xland, dx)
    overrides = model.init_overrides(
        lsm=lsm,
        regime=regime,
        qsfc=qsfc,
        znt=znt_override,
        ust=ust,
        mol=mol,
        hfx=hfx,
        lh=lh,
        pblh=pblh,
    )
    return model.run(column, overrides)
