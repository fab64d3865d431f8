"""
Process-wide configuration for Astute.

The configuration is a small dataclass read through `get_config()` and
replaced through `set_config(**overrides)`. It currently controls the random
generator used by the tensor fill operations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AstuteConfig:
    """
    Process-wide defaults.

    Attributes
    ----------
    seed : Optional[int]
        Seed of the generator behind `Tensor.fill_uniform` and
        `Tensor.fill_normal`. None draws fresh OS entropy.
    """

    seed: Optional[int] = None


_config = AstuteConfig()
_rng = np.random.default_rng(_config.seed)


def get_config() -> AstuteConfig:
    """
    Return the active configuration.
    """
    return _config


def set_config(**overrides) -> AstuteConfig:
    """
    Replace fields of the active configuration.

    Setting `seed` re-creates the fill generator, so subsequent fills are
    reproducible.

    Parameters
    ----------
    **overrides
        Field values to replace on the current configuration.

    Returns
    -------
    AstuteConfig
        The new active configuration.

    Raises
    ------
    TypeError
        If an unknown field name is given.
    """
    global _config, _rng
    _config = replace(_config, **overrides)
    if "seed" in overrides:
        _rng = np.random.default_rng(_config.seed)
    logger.debug("configuration updated: %r", _config)
    return _config


def get_rng() -> np.random.Generator:
    """
    Return the generator used by tensor fill operations.
    """
    return _rng
