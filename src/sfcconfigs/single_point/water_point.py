"""Open ocean point on a coarse grid."""

import jax.numpy as jnp

column_kwargs = {
    "psfc": jnp.array(101000.0),
    "tg": jnp.array(291.0),
    "ps": jnp.array(99700.0),
    "ts": jnp.array(290.0),
    "qs": jnp.array(0.009),
    "us": jnp.array(6.0),
    "vs": jnp.array(-2.0),
    "hs": jnp.array(25.0),
    "znt": jnp.array(2.0e-4),
    "xland": jnp.array(2.0),
    "dx": jnp.array(12000.0),
}

overrides_kwargs = {}

model_kwargs = {
    "psi_method": "table",
}
