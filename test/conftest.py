import pytest

from randomize import RandomizeOptions, RandomNumberGenerator


@pytest.fixture
def generator():
    return RandomNumberGenerator(12345)


@pytest.fixture
def make_generator():
    """Factory for seeded generators with specific range policies."""

    def _make(seed=12345, **policies):
        return RandomNumberGenerator(seed, RandomizeOptions(**policies))

    return _make
