"""Mid-latitude land point with a ground slightly warmer than the air."""

import jax.numpy as jnp

column_kwargs = {
    "psfc": jnp.array(101325.0),
    "tg": jnp.array(290.0),
    "ps": jnp.array(100000.0),
    "ts": jnp.array(288.0),
    "qs": jnp.array(0.008),
    "us": jnp.array(3.0),
    "vs": jnp.array(0.0),
    "hs": jnp.array(30.0),
    "znt": jnp.array(0.1),
    "xland": jnp.array(1.0),
    "dx": jnp.array(4000.0),
}

overrides_kwargs = {}

model_kwargs = {
    "psi_method": "table",
}
