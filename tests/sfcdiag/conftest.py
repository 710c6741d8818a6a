import jax
import pytest

import sfcconfigs.single_point as sp
import sfcdiag


@pytest.fixture
def model():
    return sfcdiag.SurfaceDiagnosticsModel()


@pytest.fixture
def analytic_model():
    return sfcdiag.SurfaceDiagnosticsModel(psi_method="analytic")


@pytest.fixture
def scenarios():
    return sp


@pytest.fixture
def load_scenario():
    """Build the column and overrides of a preset, optionally changing column inputs."""

    def load(model, config, **column_changes):
        column = model.init_column(**{**config.column_kwargs, **column_changes})
        overrides = model.init_overrides(**config.overrides_kwargs)
        return column, overrides

    return load


@pytest.fixture
def trees_equal():
    """Bitwise comparison of two pytrees of arrays."""

    def equal(a, b) -> bool:
        leaves_a, treedef_a = jax.tree_util.tree_flatten(a)
        leaves_b, treedef_b = jax.tree_util.tree_flatten(b)
        if treedef_a != treedef_b:
            return False
        return all(bool((x == y).all()) for x, y in zip(leaves_a, leaves_b))

    return equal
