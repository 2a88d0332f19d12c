"""
Seed handling for world generation.

A generation run is driven by one 64-bit master seed. Every random stream the
run needs (one noise field per climate layer, territory placement, names) gets
its own sub-seed derived from the master with the Alea PRNG, so the same
master seed always reproduces the same world.
"""

import random
from typing import Dict, Optional

from ..core.alea_prng import AleaPRNG

MAX_SEED = 2**64 - 1

# Named streams consumed by one generation run
SEED_STREAMS = ("elevation", "temperature", "humidity", "territories", "names")


def resolve_seed(seed: Optional[int] = None) -> int:
    """
    Return the seed to use for a run.

    Args:
        seed: Explicit seed, or None to draw a fresh one

    Returns:
        A seed in [0, 2**64)
    """
    if seed is None:
        return random.getrandbits(64)
    return int(seed) & MAX_SEED


def derive_seed(master_seed: int, stream: str) -> int:
    """Derive the 64-bit sub-seed for a named stream."""
    return AleaPRNG([master_seed, stream]).uint64()


def derive_seeds(master_seed: int) -> Dict[str, int]:
    """Derive sub-seeds for every stream in ``SEED_STREAMS``."""
    return {stream: derive_seed(master_seed, stream) for stream in SEED_STREAMS}
