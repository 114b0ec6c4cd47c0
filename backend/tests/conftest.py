"""
Main pytest configuration for the person registry tests.

Environment is set before any package module is imported so that cached
settings select the in-memory backends.
"""

import os
from datetime import date
from uuid import uuid4

import pytest

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["PERSISTENCE_BACKEND"] = "memory"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["NOTIFIER_CHANNELS"] = "log"
os.environ["LOG_LEVEL"] = "DEBUG"

from person_registry.domain import PersonRecord  # noqa: E402


@pytest.fixture
def person_id():
    return uuid4()


@pytest.fixture
def sample_record():
    """Stored record of a living person."""
    return PersonRecord(
        name="Alice",
        birth_date=date(2012, 11, 2),
        death_date=None,
        data="Alice is sender of the message",
        revision=0,
    )


@pytest.fixture
def sample_records():
    """Three records for batch imports."""
    return [
        PersonRecord(name="Alice", birth_date=date(2012, 11, 2), data="Alice is sender"),
        PersonRecord(name="Bob", birth_date=date(1995, 11, 6), data="Bob is receiver"),
        PersonRecord(
            name="Eve", birth_date=date(1996, 12, 15), data="Eve is interceptor"
        ),
    ]
