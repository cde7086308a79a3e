"""Shared fixtures for the unihub test suite."""

import json
from datetime import date

import pytest

from unihub.models.records import CurrentUser
from unihub.services.context import ContextAggregator
from unihub.services.intents import IntentResolver
from unihub.services.notifications import NotificationBus
from unihub.services.store import InMemoryBackend, RecordStore

TODAY = date(2024, 3, 15)


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def store(backend):
    return RecordStore(backend)


@pytest.fixture
def bus(store):
    return NotificationBus(store)


@pytest.fixture
def aggregator(store):
    return ContextAggregator(store, today=lambda: TODAY)


@pytest.fixture
def resolver():
    return IntentResolver()


@pytest.fixture
def student():
    return CurrentUser(name="Nila", role="student")


@pytest.fixture
def put_raw(backend):
    """Store a value as JSON text, the way the portal pages write it."""
    def put(key, value):
        backend.set_raw(key, json.dumps(value))
    return put
