"""Clear-sky night over land with a strong surface inversion."""

import jax.numpy as jnp

column_kwargs = {
    "psfc": jnp.array(100000.0),
    "tg": jnp.array(275.0),
    "ps": jnp.array(99650.0),
    "ts": jnp.array(281.0),
    "qs": jnp.array(0.004),
    "us": jnp.array(1.5),
    "vs": jnp.array(0.5),
    "hs": jnp.array(30.0),
    "znt": jnp.array(0.05),
    "xland": jnp.array(1.0),
    "dx": jnp.array(3000.0),
}

overrides_kwargs = {}

model_kwargs = {
    "psi_method": "table",
}
