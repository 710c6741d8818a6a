"""Windy, weakly stable land point."""

import jax.numpy as jnp

column_kwargs = {
    "psfc": jnp.array(100000.0),
    "tg": jnp.array(284.0),
    "ps": jnp.array(99640.0),
    "ts": jnp.array(285.5),
    "qs": jnp.array(0.006),
    "us": jnp.array(8.0),
    "vs": jnp.array(0.0),
    "hs": jnp.array(30.0),
    "znt": jnp.array(0.1),
    "xland": jnp.array(1.0),
    "dx": jnp.array(3000.0),
}

overrides_kwargs = {}

model_kwargs = {
    "psi_method": "table",
}
