"""Shared fixtures: one repository per backend, closed after each test."""

import pytest

from minicrm.infrastructure import (
    InMemoryContactRepository,
    JsonFileContactRepository,
    SqliteContactRepository,
)

BACKENDS = ["memory", "json", "sqlite"]


def make_repository(kind: str, tmp_path):
    if kind == "memory":
        return InMemoryContactRepository()
    if kind == "json":
        return JsonFileContactRepository(tmp_path / "contacts.json")
    return SqliteContactRepository(tmp_path / "contacts.db")


@pytest.fixture(params=BACKENDS)
def repo(request, tmp_path):
    repository = make_repository(request.param, tmp_path)
    try:
        yield repository
    finally:
        repository.close()
