# Shared fixtures for the reshaping tests: a small sales-like dataset with a
# category, a group and three numeric measures, plus a log capture fixture.

import pytest

from chartprep.services.logging_service import LoggingService


@pytest.fixture
def variables():
    return [
        {"name": "region", "declaredType": "string"},
        {"name": "quarter", "declaredType": "string"},
        {"name": "sales", "declaredType": "number"},
        {"name": "costs", "declaredType": "number"},
        {"name": "units", "declaredType": "number"},
    ]


@pytest.fixture
def rows():
    return [
        ["North", "Q1", 100, 60, 10],
        ["South", "Q1", 80, 50, 8],
        ["North", "Q2", 120, 70, 12],
        ["East", "Q2", 90, 40, 9],
        ["South", "Q2", 60, 55, 6],
        ["", "Q3", 50, 20, 5],
        ["East", "Q3", "n/a", 30, 3],
    ]


@pytest.fixture
def log_capture():
    svc = LoggingService(capacity=100)
    svc.attach()
    yield svc
    svc.detach()
