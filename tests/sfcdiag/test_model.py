import math

import jax
import jax.numpy as jnp
import numpy as np
import pytest

import sfcdiag
from sfcdiag.column import Overrides, Regime
from sfcdiag.extrapolation import (
    compute_water_profile_functions,
    compute_water_roughness,
)
from sfcdiag.preprocessing import preprocess
from sfcdiag.utils import PhysicalConstants, compute_saturation

cst = PhysicalConstants()

SCENARIOS = [
    "convective_lsm",
    "land_point",
    "mechanical_turbulence",
    "neutral",
    "stable_night",
    "water_point",
]


def assert_trees_close(a, b, rtol=1e-5, atol=1e-6):
    for x, y in zip(jax.tree_util.tree_leaves(a), jax.tree_util.tree_leaves(b)):
        np.testing.assert_allclose(np.asarray(x), np.asarray(y), rtol=rtol, atol=atol)


@pytest.mark.parametrize("name", SCENARIOS)
def test_scenarios_are_finite(scenarios, load_scenario, name):
    config = getattr(scenarios, name)
    model = sfcdiag.SurfaceDiagnosticsModel(**config.model_kwargs)
    column, overrides = load_scenario(model, config)
    diagnostics = model.run(column, overrides)
    for value in jax.tree_util.tree_leaves(diagnostics):
        assert np.all(np.isfinite(np.asarray(value)))
    assert float(diagnostics.ust) > 0.0
    assert float(diagnostics.chs2) > 0.0
    assert float(diagnostics.cqs2) > 0.0


def test_neutral_column_follows_log_profile(model, scenarios, load_scenario):
    column, overrides = load_scenario(model, scenarios.neutral)
    diagnostics = model.run(column, overrides)

    assert diagnostics.regime_case is Regime.FORCED_CONVECTION
    for value in jax.tree_util.tree_leaves(diagnostics.corrections):
        assert float(value) == 0.0

    ratio = math.log(10.0 / 0.05) / math.log(20.0 / 0.05)
    assert float(diagnostics.u10) == pytest.approx(5.0 * ratio, rel=1e-5)
    assert float(diagnostics.v10) == 0.0
    assert float(diagnostics.t2) == pytest.approx(288.0)
    assert float(diagnostics.q2) == pytest.approx(0.008)
    assert float(diagnostics.ust) == pytest.approx(
        0.4 * 5.0 / math.log(20.0 / 0.05), rel=1e-5
    )


def test_land_point(model, scenarios, load_scenario):
    column, overrides = load_scenario(model, scenarios.land_point)
    diagnostics = model.run(column, overrides)
    thermo = preprocess(column, overrides, compute_saturation)

    # the ground is warmer than the air, so the column is unstable
    assert diagnostics.regime_case is Regime.FREE_CONVECTION
    assert float(diagnostics.rib_number) < 0.0
    assert float(diagnostics.mol) < 0.0
    assert float(diagnostics.corrections.zol) < 0.0
    assert 0.0 < float(diagnostics.u10) < 3.0
    assert float(diagnostics.v10) == 0.0
    assert 288.0 < float(diagnostics.t2) < 290.0
    assert 0.008 < float(diagnostics.q2) < float(thermo.qsfc)
    assert float(diagnostics.chs2) == float(diagnostics.cqs2)


def test_run_is_idempotent(model, scenarios, load_scenario, trees_equal):
    column, overrides = load_scenario(model, scenarios.water_point)
    assert trees_equal(model.run(column, overrides), model.run(column, overrides))


def test_run_without_overrides(model, scenarios, load_scenario, trees_equal):
    column, _ = load_scenario(model, scenarios.land_point)
    assert trees_equal(model.run(column), model.run(column, Overrides()))


def test_overrides_take_precedence(model, scenarios, load_scenario):
    column, _ = load_scenario(model, scenarios.land_point)

    diagnostics = model.run(column, model.init_overrides(ust=0.5, mol=-0.2))
    assert float(diagnostics.ust) == pytest.approx(0.5)
    assert float(diagnostics.mol) == pytest.approx(-0.2)

    diagnostics = model.run(column, model.init_overrides(regime=1.0))
    assert diagnostics.regime_case is Regime.STABLE
    assert float(diagnostics.corrections.psim) == pytest.approx(-10.0)

    diagnostics = model.run(column, model.init_overrides(znt=0.5))
    reference = model.run(column)
    assert float(diagnostics.u10) < float(reference.u10)

    diagnostics = model.run(column, model.init_overrides(qsfc=0.008))
    assert float(diagnostics.q2) == pytest.approx(0.008, rel=1e-5)


def test_zero_roughness_uses_minimum(model, scenarios, load_scenario, trees_equal):
    bare, _ = load_scenario(model, scenarios.land_point, znt=0.0)
    floor, _ = load_scenario(model, scenarios.land_point, znt=1e-4)
    assert trees_equal(model.run(bare), model.run(floor))


@pytest.mark.parametrize("name", ["land_point", "stable_night"])
def test_friction_velocity_increases_with_wind(model, scenarios, load_scenario, name):
    ust = []
    for us in np.linspace(0.0, 15.0, 31):
        column, overrides = load_scenario(model, getattr(scenarios, name), us=us)
        ust.append(float(model.run(column, overrides).ust))
    assert np.all(np.diff(ust) >= -1e-6)
    assert ust[-1] > ust[0]


def test_table_and_analytic_models_agree(
    model, analytic_model, scenarios, load_scenario
):
    for config in (scenarios.land_point, scenarios.water_point):
        column, overrides = load_scenario(model, config)
        table = model.run(column, overrides)
        exact = analytic_model.run(column, overrides)
        assert int(table.regime) == int(exact.regime)
        assert float(table.u10) == pytest.approx(float(exact.u10), rel=1e-3)
        assert float(table.t2) == pytest.approx(float(exact.t2), abs=1e-2)
        assert float(table.q2) == pytest.approx(float(exact.q2), rel=1e-3)
        assert float(table.ust) == pytest.approx(float(exact.ust), rel=1e-3)


@pytest.mark.parametrize("name", ["convective_lsm", "stable_night"])
def test_jit_matches_eager(model, scenarios, load_scenario, name):
    column, overrides = load_scenario(model, getattr(scenarios, name))
    eager = model.run(column, overrides)
    compiled = jax.jit(model.run)(column, overrides)
    assert int(compiled.regime) == int(eager.regime)
    assert_trees_close(compiled, eager)


def test_vmap_over_columns(model, scenarios, load_scenario):
    names = ["land_point", "stable_night", "mechanical_turbulence"]
    columns = [load_scenario(model, getattr(scenarios, name))[0] for name in names]
    batch = jax.tree_util.tree_map(lambda *xs: jnp.stack(xs), *columns)

    diagnostics = jax.vmap(model.run)(batch)
    assert diagnostics.u10.shape == (3,)
    np.testing.assert_array_equal(
        np.asarray(diagnostics.regime),
        [Regime.FREE_CONVECTION, Regime.STABLE, Regime.MECHANICAL],
    )
    for i, column in enumerate(columns):
        single = jax.tree_util.tree_map(lambda x: x[i], diagnostics)
        assert_trees_close(single, model.run(column))

    # the enum view is only defined per column
    with pytest.raises(TypeError):
        diagnostics.regime_case


def test_wrapper_matches_model(model, scenarios, load_scenario):
    kwargs = {k: float(v) for k, v in scenarios.land_point.column_kwargs.items()}
    column, overrides = load_scenario(model, scenarios.land_point)
    assert_trees_close(
        sfcdiag.compute_surface_diagnostics(**kwargs), model.run(column, overrides)
    )

    diagnostics = sfcdiag.compute_surface_diagnostics(
        **kwargs, regime=2.0, znt_override=0.3
    )
    assert diagnostics.regime_case is Regime.MECHANICAL


def test_invalid_psi_method(scenarios):
    kwargs = {k: float(v) for k, v in scenarios.land_point.column_kwargs.items()}
    with pytest.raises(ValueError, match="psi_method"):
        sfcdiag.SurfaceDiagnosticsModel(psi_method="spline")
    with pytest.raises(ValueError, match="psi_method"):
        sfcdiag.compute_surface_diagnostics(**kwargs, psi_method="spline")


def test_water_point_uses_thermal_roughness(model, scenarios, load_scenario):
    water_column, overrides = load_scenario(model, scenarios.water_point)
    land_column, _ = load_scenario(model, scenarios.water_point, xland=1.0)
    water = model.run(water_column, overrides)
    land = model.run(land_column, overrides)
    assert float(water.t2) != pytest.approx(float(land.t2))
    assert float(land.chs2) == float(land.cqs2)


def test_water_point_scalars_follow_thermal_roughness(
    model, scenarios, load_scenario
):
    column, overrides = load_scenario(model, scenarios.water_point)
    thermo = preprocess(column, overrides, compute_saturation)
    diagnostics = model.run(column, overrides)
    corrections = diagnostics.corrections

    z0t = compute_water_roughness(diagnostics.ust, thermo.z0, column.ts)
    psit = compute_water_profile_functions(column.hs, z0t, corrections.psih)
    psit2 = compute_water_profile_functions(2.0, z0t, corrections.psih2)

    # heat and moisture share the thermal roughness over water
    expected_th2 = thermo.thgb + (thermo.thx - thermo.thgb) * psit2 / psit
    expected_q2 = thermo.qsfc + (column.qs - thermo.qsfc) * psit2 / psit
    assert float(diagnostics.th2) == pytest.approx(float(expected_th2), rel=1e-6)
    assert float(diagnostics.q2) == pytest.approx(float(expected_q2), rel=1e-5)
    expected_cqs2 = cst.k * diagnostics.ust / psit2
    assert float(diagnostics.cqs2) == pytest.approx(float(expected_cqs2))
    assert float(diagnostics.chs2) == float(diagnostics.cqs2)


@pytest.mark.parametrize("name", ["stable_night", "land_point"])
def test_forced_mechanical_regime_stays_physical(
    model, scenarios, load_scenario, name
):
    column, _ = load_scenario(model, getattr(scenarios, name))
    diagnostics = model.run(column, model.init_overrides(regime=2.0))

    assert diagnostics.regime_case is Regime.MECHANICAL
    for value in jax.tree_util.tree_leaves(diagnostics):
        assert np.all(np.isfinite(np.asarray(value)))
    assert float(diagnostics.ust) > 0.0
    assert np.sign(float(diagnostics.u10)) == np.sign(float(column.us))
    assert float(diagnostics.corrections.psim) <= 0.0


def test_forced_mechanical_regime_on_strongly_stable_column():
    diagnostics = sfcdiag.compute_surface_diagnostics(
        psfc=101325.0,
        tg=280.0,
        ps=1.0e5,
        ts=290.0,
        qs=0.005,
        us=2.0,
        vs=0.0,
        hs=30.0,
        znt=0.1,
        xland=1.0,
        dx=4000.0,
        regime=2.0,
    )
    assert float(diagnostics.rib_number) > 0.2
    assert float(diagnostics.ust) > 0.0
    assert 0.0 < float(diagnostics.u10) < 2.0
    assert np.isfinite(float(diagnostics.q2))
    assert 280.0 < float(diagnostics.t2) < 290.0


def test_lsm_fluxes_set_2m_values(model, scenarios, load_scenario):
    column, overrides = load_scenario(model, scenarios.convective_lsm)
    thermo = preprocess(column, overrides, compute_saturation)
    diagnostics = model.run(column, overrides)

    expected_t2 = 305.0 - 250.0 / (thermo.rho * cst.cp * diagnostics.chs2)
    expected_q2 = thermo.qsfc - 300.0 / cst.lv / (thermo.rho * diagnostics.cqs2)
    assert float(diagnostics.t2) == pytest.approx(float(expected_t2), rel=1e-5)
    assert float(diagnostics.q2) == pytest.approx(float(expected_q2), rel=1e-4)

    uncoupled = model.run(column, overrides.replace(lsm=False))
    assert float(uncoupled.t2) != pytest.approx(float(diagnostics.t2))
