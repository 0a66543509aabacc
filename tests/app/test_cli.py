from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from deedsync.app import build_services
from deedsync.config import JurisdictionConfig, SyncConfig
from deedsync.domain.reconciliation import ReconcileResult
from deedsync.ui import cli as cli_module
from tests.helpers.fakes import FakeStore

if TYPE_CHECKING:
    from pathlib import Path


def test_init_db_passes_database_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_initialise(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli_module, "initialise_database", fake_initialise)

    cli_module.main(["init-db", "--database-uri", "sqlite+pysqlite:///deeds.db"])

    assert captured == {"database_uri": "sqlite+pysqlite:///deeds.db"}


def test_init_db_defaults_to_config(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_initialise(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(cli_module, "initialise_database", fake_initialise)

    cli_module.main(["init-db"])

    assert captured == {"database_uri": None}


def test_reconcile_reads_nodes_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    nodes_file = tmp_path / "nodes.txt"
    nodes_file.write_text("A1\n\n  B2  \nC3\n", encoding="utf-8")
    captured: dict[str, object] = {}

    def fake_reconcile(
        county: str | None,
        state: str | None,
        observed: list[str],
    ) -> ReconcileResult:
        captured.update(county=county, state=state, observed=observed)
        return ReconcileResult(county="Polk", state="FL", removed_marked=1)

    monkeypatch.setattr(cli_module, "reconcile_jurisdiction", fake_reconcile)

    cli_module.main(["reconcile", "--county", "Polk", "--nodes-file", str(nodes_file)])

    assert captured == {"county": "Polk", "state": None, "observed": ["A1", "B2", "C3"]}


def test_reconcile_missing_nodes_file_is_validation_error(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    def fake_reconcile(*_: object, **__: object) -> None:
        raise AssertionError("reconcile must not run")

    monkeypatch.setattr(cli_module, "reconcile_jurisdiction", fake_reconcile)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["reconcile", "--nodes-file", str(tmp_path / "absent.txt")])

    assert excinfo.value.code == 2


def test_state_reads_checkpoint(monkeypatch: pytest.MonkeyPatch) -> None:
    store = FakeStore()
    services = build_services(
        unit_of_work_factory=store.unit_of_work,
        jurisdictions=JurisdictionConfig(),
        sync=SyncConfig(),
    )
    monkeypatch.setattr(cli_module, "build_services", lambda: services)

    cli_module.main(["state", "orange_taxdeed"])

    assert "orange_taxdeed" in store.scraper_states.states
    assert store.commits == 1


def test_command_failure_exits_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_initialise(**_: object) -> None:
        raise RuntimeError("database unreachable")

    monkeypatch.setattr(cli_module, "initialise_database", failing_initialise)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["init-db"])

    assert excinfo.value.code == 1


def test_missing_command_is_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 2
