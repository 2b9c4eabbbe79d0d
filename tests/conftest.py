"""Test configuration for leastpath."""

import pytest

from leastpath.app.core import SimulationState
from leastpath.domains.register import register_all_domains
from leastpath.types import Domain


@pytest.fixture(scope="session", autouse=True)
def register_domains():
    """Ensure the domain registry is populated for all tests."""
    register_all_domains()


@pytest.fixture
def refraction_state():
    return SimulationState.for_domain(Domain.REFRACTION)


@pytest.fixture
def mechanics_state():
    return SimulationState.for_domain(Domain.MECHANICS)


@pytest.fixture
def interference_state():
    return SimulationState.for_domain(Domain.INTERFERENCE)
