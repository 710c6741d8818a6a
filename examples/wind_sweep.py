import jax
import jax.numpy as jnp
import matplotlib.pyplot as plt

import sfcconfigs.single_point as sp
import sfcdiag


def main():
    model = sfcdiag.SurfaceDiagnosticsModel(**sp.land_point.model_kwargs)
    wind = jnp.linspace(0.0, 15.0, 151)

    # one column per wind speed, everything else from the presets
    _, axes = plt.subplots(1, 3, figsize=(12, 4))
    for name in ("land_point", "stable_night", "water_point"):
        config = getattr(sp, name)
        columns = jax.vmap(
            lambda us: model.init_column(**{**config.column_kwargs, "us": us})
        )(wind)
        diagnostics = jax.jit(jax.vmap(model.run))(columns)

        axes[0].plot(wind, diagnostics.ust, label=name)
        axes[1].plot(wind, diagnostics.u10, label=name)
        axes[2].plot(wind, diagnostics.regime, label=name)

    axes[0].set_ylabel("Friction velocity [m s-1]")
    axes[1].set_ylabel("10m zonal wind [m s-1]")
    axes[2].set_ylabel("Regime [-]")
    for ax in axes:
        ax.set_xlabel("Lowest level zonal wind [m s-1]")
        ax.legend()
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
