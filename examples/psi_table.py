import jax.numpy as jnp
import matplotlib.pyplot as plt

from sfcdiag.similarity import evaluate_unstable


def main():
    zeta = jnp.linspace(-9.9999, 0.0, 2000)
    psim_table, psih_table = evaluate_unstable(zeta, "table")
    psim_exact, psih_exact = evaluate_unstable(zeta, "analytic")

    _, axes = plt.subplots(1, 2, figsize=(10, 4))
    axes[0].plot(zeta, psim_exact, label=r"$\Psi_m$")
    axes[0].plot(zeta, psih_exact, label=r"$\Psi_h$")
    axes[0].set_xlabel(r"$\zeta$ [-]")
    axes[0].set_ylabel("Stability correction [-]")
    axes[0].legend()
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(zeta, psim_table - psim_exact, label=r"$\Psi_m$")
    axes[1].plot(zeta, psih_table - psih_exact, label=r"$\Psi_h$")
    axes[1].set_xlabel(r"$\zeta$ [-]")
    axes[1].set_ylabel("Table minus closed form [-]")
    axes[1].legend()
    axes[1].grid(True, alpha=0.3)

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
