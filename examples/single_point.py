import logging

import sfcconfigs.single_point as sp
import sfcdiag


def main():
    logging.basicConfig(level=logging.DEBUG)

    for name in sp.__all__:
        config = getattr(sp, name)

        # define model and its inputs
        model = sfcdiag.SurfaceDiagnosticsModel(**config.model_kwargs)
        column = model.init_column(**config.column_kwargs)
        overrides = model.init_overrides(**config.overrides_kwargs)

        # run run run
        diagnostics = model.run(column, overrides)

        print(
            f"{name:>22s} | regime {diagnostics.regime_case.name:<17s}"
            f" | Ri {float(diagnostics.rib_number):+.3f}"
            f" | u10 {float(diagnostics.u10):6.2f} m s-1"
            f" | t2 {float(diagnostics.t2):7.2f} K"
            f" | q2 {1e3 * float(diagnostics.q2):6.2f} g kg-1"
        )


if __name__ == "__main__":
    main()
