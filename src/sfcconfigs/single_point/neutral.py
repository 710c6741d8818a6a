"""Neutral land point: the air at the lowest level matches the ground exactly."""

import jax.numpy as jnp

column_kwargs = {
    "psfc": jnp.array(100000.0),
    "tg": jnp.array(288.0),
    "ps": jnp.array(100000.0),
    "ts": jnp.array(288.0),
    "qs": jnp.array(0.008),
    "us": jnp.array(5.0),
    "vs": jnp.array(0.0),
    "hs": jnp.array(20.0),
    "znt": jnp.array(0.05),
    "xland": jnp.array(1.0),
    "dx": jnp.array(3000.0),
}

# the ground humidity is pinned to the air humidity
overrides_kwargs = {
    "qsfc": 0.008,
}

model_kwargs = {
    "psi_method": "table",
}
