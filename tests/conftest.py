"""
Pytest configuration and shared fixtures for the sum-check tests.
"""

import sys
from pathlib import Path

import pytest

# tests/ sits inside the repository root
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from primitives.field import FF, field_for_modulus  # noqa: E402
from primitives.multilinear import MultilinearPolynomial  # noqa: E402


@pytest.fixture
def gf17():
    """GF(17), the field of the worked two-variable example."""
    return field_for_modulus(17)


@pytest.fixture
def gf97():
    """A second small field for mismatch tests."""
    return field_for_modulus(97)


@pytest.fixture
def example_poly(gf17):
    """P over (0,0),(0,1),(1,0),(1,1) = [3, 5, 7, 2]; sums to 17 = 0 mod 17."""
    return MultilinearPolynomial([3, 5, 7, 2], field=gf17)


@pytest.fixture
def random_poly():
    """Factory for seeded random polynomials over the default field."""
    def make(num_vars: int, seed: int = 0) -> MultilinearPolynomial:
        return MultilinearPolynomial.random(num_vars, field=FF, seed=seed)
    return make


@pytest.fixture
def random_point():
    """Factory for seeded random points over the default field."""
    def make(num_vars: int, seed: int = 1) -> list:
        return list(FF.Random(num_vars, seed=seed))
    return make
