"""Shared pytest fixtures for bargaining simulator tests."""

import sys
from datetime import datetime, timedelta, timezone
from itertools import count
from pathlib import Path

import numpy as np
import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


from bargaining.generator import OfferGenerator
from bargaining.models import SessionConfig, Variant
from bargaining.sampling import RandomSampler
from bargaining.session import NegotiationSession


START_TIME = datetime(2026, 10, 19, 12, 30, 45, 123000, tzinfo=timezone.utc)


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: statistical tests that draw many samples")


@pytest.fixture
def rng():
    """Seeded numpy generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def sampler(rng):
    return RandomSampler(rng)


@pytest.fixture
def clock():
    """Deterministic UTC clock advancing one second per call."""
    ticks = count()
    return lambda: START_TIME + timedelta(seconds=next(ticks))


@pytest.fixture
def fixed_skew_config():
    return SessionConfig(variant=Variant.FIXED_SKEW, seed=7)


@pytest.fixture
def alternating_config():
    return SessionConfig(variant=Variant.ALTERNATING, seed=7)


@pytest.fixture
def fixed_skew_session(fixed_skew_config, clock):
    return NegotiationSession(fixed_skew_config, clock=clock)


@pytest.fixture
def alternating_session(alternating_config, clock):
    return NegotiationSession(alternating_config, clock=clock)


@pytest.fixture
def alternating_generator(alternating_config):
    return OfferGenerator.from_config(alternating_config)
