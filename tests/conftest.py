"""Shared fixtures for Budget Ledger tests."""

from datetime import datetime, timezone
from itertools import count

import pytest

from budget_ledger.audit import AuditLogger
from budget_ledger.ledger import Ledger
from budget_ledger.services.storage import InMemoryKeyValueStorage


FIXED_TIME = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def sequential_ids():
    """Id factory returning _id1, _id2, ..."""
    counter = count(1)
    return lambda: f"_id{next(counter)}"


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def ledger(sequential_ids, fixed_clock):
    return Ledger(id_factory=sequential_ids, clock=fixed_clock)


@pytest.fixture
def memory_storage():
    return InMemoryKeyValueStorage()


@pytest.fixture
def audit_logger():
    return AuditLogger(history_size=50)
