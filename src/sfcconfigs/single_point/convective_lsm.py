"""Summer afternoon over land, coupled to a land surface model."""

import jax.numpy as jnp

column_kwargs = {
    "psfc": jnp.array(98500.0),
    "tg": jnp.array(305.0),
    "ps": jnp.array(98150.0),
    "ts": jnp.array(298.0),
    "qs": jnp.array(0.012),
    "us": jnp.array(2.0),
    "vs": jnp.array(1.0),
    "hs": jnp.array(30.0),
    "znt": jnp.array(0.15),
    "xland": jnp.array(1.0),
    "dx": jnp.array(3000.0),
}

overrides_kwargs = {
    "lsm": True,
    "hfx": 250.0,
    "lh": 300.0,
    "pblh": 1500.0,
}

model_kwargs = {
    "psi_method": "table",
}
