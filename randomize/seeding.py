"""
Seed helpers: ambient entropy for unseeded generators, deterministic
sub-seeds for reproducible independent streams, and temporary reseeding.
"""

import contextlib
import hashlib
import os
import threading
import time
import uuid

UINT32_MASK = 0xFFFFFFFF

_SEED_FACTOR = 19


def new_seed() -> int:
    """Mix the clock, a random UUID, the thread id and the process id into a 32-bit seed."""
    guid = uuid.uuid4().bytes
    seed = (_SEED_FACTOR * 1777771 + time.monotonic_ns()) & UINT32_MASK
    seed = (_SEED_FACTOR * seed + int.from_bytes(guid[0:4], "little")) & UINT32_MASK
    seed = (_SEED_FACTOR * seed + int.from_bytes(guid[8:12], "little")) & UINT32_MASK
    seed = (_SEED_FACTOR * seed + threading.get_ident()) & UINT32_MASK
    return (_SEED_FACTOR * seed + os.getpid()) & UINT32_MASK


def derive_seed(base_seed: int, *labels) -> int:
    s = "|".join(str(part) for part in (base_seed,) + labels).encode()
    return int.from_bytes(hashlib.sha256(s).digest()[:4], "big")


@contextlib.contextmanager
def use_seed(generator, seed: int):
    """Reseed *generator* for the duration of the block, then restore its exact state."""
    state = generator.getstate()
    generator.reset(seed)
    try:
        yield generator
    finally:
        generator.setstate(state)
