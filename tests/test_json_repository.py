"""Tests for the JSON-file repository: file format, reload, corrupt files, atomic writes."""

import json
import logging
from pathlib import Path

import pytest

from minicrm.application import ContactService
from minicrm.domain import Contact, DuplicateEmailError, NotFoundError, StorageError
from minicrm.infrastructure import JsonFileContactRepository
from minicrm.infrastructure import json_repository


def _seed(repo: JsonFileContactRepository, n: int) -> list[Contact]:
    return [
        repo.create(Contact(name=f"Person {i}", email=f"p{i}@x.com", phone="0612345678"))
        for i in range(n)
    ]


def test_missing_file_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "contacts.json"
    repo = JsonFileContactRepository(path)
    assert repo.get_all() == []
    assert not path.exists()


def test_file_written_on_every_mutation(tmp_path: Path) -> None:
    path = tmp_path / "contacts.json"
    repo = JsonFileContactRepository(path)
    created = repo.create(Contact(name="Ada", email="ada@x.com"))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert isinstance(data, list)
    assert len(data) == 1
    assert set(data[0]) == {"id", "name", "email", "phone", "created_at", "updated_at"}
    assert data[0]["id"] == created.id
    assert data[0]["email"] == "ada@x.com"

    repo.delete(created.id)
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_reopen_yields_same_records_and_higher_next_id(tmp_path: Path) -> None:
    path = tmp_path / "contacts.json"
    repo = JsonFileContactRepository(path)
    created = _seed(repo, 4)
    repo.close()

    reopened = JsonFileContactRepository(path)
    loaded = reopened.get_all()
    assert [(c.id, c.name, c.email, c.phone) for c in loaded] == [
        (c.id, c.name, c.email, c.phone) for c in created
    ]
    assert loaded[0].created_at == created[0].created_at

    new = reopened.create(Contact(name="New", email="new@x.com"))
    assert new.id > max(c.id for c in created)


def test_next_id_from_max_loaded_id(tmp_path: Path) -> None:
    path = tmp_path / "contacts.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": 7,
                    "name": "Seven",
                    "email": "seven@x.com",
                    "phone": "",
                    "created_at": "2024-05-01T10:00:00Z",
                    "updated_at": "2024-05-01T10:00:00Z",
                },
                {
                    "id": 3,
                    "name": "Three",
                    "email": "three@x.com",
                    "created_at": "2024-05-01T10:00:00.123456789+02:00",
                    "updated_at": "2024-05-02T10:00:00+02:00",
                },
            ]
        ),
        encoding="utf-8",
    )
    repo = JsonFileContactRepository(path)
    assert [c.id for c in repo.get_all()] == [3, 7]
    assert repo.get_by_id(3).phone == ""
    assert repo.create(Contact(name="Eight", email="eight@x.com")).id == 8


def test_null_document_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "contacts.json"
    path.write_text("null", encoding="utf-8")
    assert JsonFileContactRepository(path).get_all() == []


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "",
        '{"id": 1}',
        "[1, 2]",
        '[{"id": "1", "name": "A", "email": "a@x.com", "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
        '[{"id": 0, "name": "A", "email": "a@x.com", "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
        '[{"id": 1, "email": "a@x.com", "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
        '[{"id": 1, "name": "A", "email": "a@x.com", "created_at": "yesterday", "updated_at": "2024-01-01T00:00:00"}]',
        '[{"id": 1, "name": "A", "email": "a@x.com", "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"},'
        ' {"id": 1, "name": "B", "email": "b@x.com", "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
        '[{"id": 1, "name": "", "email": "a@x.com", "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
        '[{"id": 1, "name": "A", "email": "a@x.com", "phone": "0512345678", "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
        '[{"id": 1, "name": "A", "email": "A@X.COM", "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"},'
        ' {"id": 2, "name": "B", "email": "a@x.com", "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
        '[{"id": 1, "name": "A", "email": "a@x.com", "phone": 0, "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
        '[{"id": 1, "name": "A", "email": "a@x.com", "phone": false, "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
        '[{"id": 1, "name": "A", "email": "a@x.com", "phone": [], "created_at": "2024-01-01T00:00:00", "updated_at": "2024-01-01T00:00:00"}]',
    ],
)
def test_invalid_file_raises_storage_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "contacts.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StorageError):
        JsonFileContactRepository(path)


def test_failed_write_leaves_file_and_memory_intact(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "contacts.json"
    repo = JsonFileContactRepository(path)
    first = repo.create(Contact(name="Ada", email="ada@x.com"))
    before = path.read_text(encoding="utf-8")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(json_repository.os, "replace", broken_replace)
    with pytest.raises(StorageError, match="disk full"):
        repo.create(Contact(name="Bob", email="bob@x.com"))
    with pytest.raises(StorageError):
        repo.delete(first.id)

    assert path.read_text(encoding="utf-8") == before
    assert [c.id for c in repo.get_all()] == [first.id]
    assert list(tmp_path.glob("*.tmp")) == []

    monkeypatch.undo()
    second = repo.create(Contact(name="Bob", email="bob@x.com"))
    assert second.id == first.id + 1


def test_creates_parent_directories(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "contacts.json"
    repo = JsonFileContactRepository(path)
    repo.create(Contact(name="Ada", email="ada@x.com"))
    assert path.exists()


def test_deleted_contact_gone_after_reopen(tmp_path: Path) -> None:
    path = tmp_path / "contacts.json"
    repo = JsonFileContactRepository(path)
    a, b = _seed(repo, 2)
    repo.delete(a.id)

    reopened = JsonFileContactRepository(path)
    with pytest.raises(NotFoundError):
        reopened.get_by_id(a.id)
    assert reopened.get_by_id(b.id).email == b.email


def test_load_is_logged(tmp_path: Path, caplog) -> None:
    path = tmp_path / "contacts.json"
    _seed(JsonFileContactRepository(path), 2)
    with caplog.at_level(logging.INFO, logger="minicrm.infrastructure.json_repository"):
        JsonFileContactRepository(path)
    assert "Loaded 2 contacts" in caplog.text


def test_loaded_records_are_normalized(tmp_path: Path) -> None:
    path = tmp_path / "contacts.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": 1,
                    "name": "  Ada ",
                    "email": " ADA@X.COM",
                    "phone": None,
                    "created_at": "2024-01-01T00:00:00Z",
                    "updated_at": "2024-01-01T00:00:00Z",
                },
                {
                    "id": 2,
                    "name": "Bob",
                    "email": "bob@x.com",
                    "created_at": "2024-01-01T00:00:00Z",
                    "updated_at": "2024-01-01T00:00:00Z",
                },
            ]
        ),
        encoding="utf-8",
    )
    repo = JsonFileContactRepository(path)
    ada = repo.get_by_id(1)
    assert (ada.name, ada.email, ada.phone) == ("Ada", "ada@x.com", "")
    assert repo.get_by_email("ada@x.com").id == 1

    service = ContactService(repository=repo)
    with pytest.raises(DuplicateEmailError):
        service.create_contact("Ada Again", "ada@x.com")
    assert len(service.list_contacts()) == 2
