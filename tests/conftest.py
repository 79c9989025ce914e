"""Shared pytest fixtures for template-sync tests."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any

import pytest

from template_sync.config import Config
from template_sync.errors import TransportError
from template_sync.models import ProvisionResult, Record
from template_sync.sync.context import SessionContext


class FakeRemoteClient:
    """In-memory stand-in for ``RemoteClient``.

    Templates live in ``self.templates`` keyed by id. Every call is
    recorded in ``self.calls`` as ``(method, args)``. Setting one of the
    ``fail_*`` attributes makes that method raise ``TransportError``.
    """

    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self.templates: dict[Any, Record] = {}
        for data in records or []:
            record = Record(**data)
            self.templates[record.id] = record
        self.calls: list[tuple[str, tuple]] = []
        self.fail_list = False
        self.fail_get = False
        self.fail_update = False
        self.fail_provision = False
        # path requested -> canonical path assigned by the "server"
        self.canonical_paths: dict[str, str] = {}
        self._next_id = 1000
        self._version = 0

    def _stamp(self) -> str:
        self._version += 1
        return f"2026-01-01T00:00:{self._version:02d}Z"

    def list_templates(self) -> list[Record]:
        self.calls.append(("list", ()))
        if self.fail_list:
            raise TransportError("GET / failed", detail="connection refused")
        return list(self.templates.values())

    def get_template(self, record_id) -> Record:
        self.calls.append(("get", (record_id,)))
        if self.fail_get or record_id not in self.templates:
            raise TransportError(f"GET /{record_id} rejected", status_code=404)
        return self.templates[record_id]

    def update_template(self, record_id, code, updated_at=None) -> Record:
        self.calls.append(("update", (record_id, code, updated_at)))
        if self.fail_update:
            raise TransportError(
                f"PATCH /{record_id} rejected",
                status_code=409,
                detail="stale updated_at",
            )
        current = self.templates[record_id]
        updated = current.model_copy(
            update={"code": code, "updated_at": self._stamp()}
        )
        self.templates[record_id] = updated
        return updated

    def provision_template(self, file_path: str) -> ProvisionResult:
        self.calls.append(("provision", (file_path,)))
        if self.fail_provision:
            raise TransportError("POST /cli rejected", status_code=422)
        self._next_id += 1
        canonical = self.canonical_paths.get(file_path, file_path)
        self.templates[self._next_id] = Record(
            id=self._next_id,
            file_path=canonical,
            code="",
            updated_at=self._stamp(),
        )
        return ProvisionResult(tmpl_main_id=self._next_id)

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)


class FakeWatcher:
    """Records ``paused()`` usage in place of a ``ChangeWatcher``."""

    def __init__(self) -> None:
        self.paused_paths: list[tuple[str, ...]] = []
        self.active: set[str] = set()

    @contextmanager
    def paused(self, *relative_paths: str):
        self.paused_paths.append(relative_paths)
        self.active.update(relative_paths)
        try:
            yield
        finally:
            self.active.difference_update(relative_paths)


@pytest.fixture
def mock_config(tmp_path: Path) -> Config:
    """A valid Config whose workspace lives under tmp_path."""
    return Config(
        token="site42-secret",
        env="localhost",
        base_url="http://localhost:9000/api/template",
        parent_dir=str(tmp_path),
        debounce_ms=50,
        request_timeout=5.0,
    )


@pytest.fixture
def fake_client() -> FakeRemoteClient:
    return FakeRemoteClient(
        [
            {
                "id": 1,
                "file_path": "views/pages/index.ejs",
                "code": "<h1><%= item.title %></h1>",
                "updated_at": "2026-01-01T00:00:00Z",
            },
            {
                "id": 2,
                "file_path": "css/tailwind.css",
                "code": "@import 'tailwindcss';",
                "updated_at": "2026-01-01T00:00:00Z",
            },
        ]
    )


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "site42-views"
    root.mkdir()
    return root


@pytest.fixture
def ctx(fake_client: FakeRemoteClient, workspace: Path) -> SessionContext:
    """A SessionContext tracking both fake templates, written to disk."""
    context = SessionContext(client=fake_client, root=workspace)  # type: ignore[arg-type]
    for record in fake_client.templates.values():
        target = workspace / record.file_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(record.code, encoding="utf-8")
        context.sync_map.put(record.file_path, record)
    return context


@pytest.fixture
def fake_watcher() -> FakeWatcher:
    return FakeWatcher()
