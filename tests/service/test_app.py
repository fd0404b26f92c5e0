"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from doccheck.errors import ConfigNotFoundError, PatternError
from doccheck.models import CheckResult, CoverageViolation, LinkEntry
from doccheck.service import create_app
from tests._fixtures.repo_builder import RepoBuilder


class _StubOrchestrator:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict[str, object]] = []
        self.error = error

    def run_path(self, config_path: str, *, strict: bool | None = None, jobs: int | None = None) -> CheckResult:
        self.calls.append({"config_path": config_path, "strict": strict, "jobs": jobs})
        if self.error is not None:
            raise self.error
        return CheckResult(
            files=(),
            coverage=(CoverageViolation(symbol="foo"),),
            links=(LinkEntry("Buffer", None),),
            symbol_count=1,
            strict=bool(strict),
        )


def _client(orchestrator: _StubOrchestrator) -> TestClient:
    return TestClient(create_app(lambda: orchestrator))


def test_health_endpoint() -> None:
    response = _client(_StubOrchestrator()).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_check_endpoint_returns_report() -> None:
    orchestrator = _StubOrchestrator()

    response = _client(orchestrator).post("/check", json={"config_path": "/repo", "strict": True})

    assert response.status_code == 200
    data = response.json()
    assert data["exit_code"] == 1
    assert data["strict"] is True
    assert data["coverage"] == [{"symbol": "foo", "reason": "MissingDocumentation"}]
    assert data["links"] == [{"reference": "Buffer", "resolvedURL": None}]
    assert orchestrator.calls == [{"config_path": "/repo", "strict": True, "jobs": None}]


@pytest.mark.parametrize(
    "error, status",
    [
        (ConfigNotFoundError("Configuration file not found: /repo/.docs-check.yml"), 404),
        (PatternError("Unclosed '[' in glob pattern 'lib/[a'"), 400),
    ],
)
def test_check_endpoint_maps_errors(error: Exception, status: int) -> None:
    response = _client(_StubOrchestrator(error)).post("/check", json={"config_path": "/repo"})

    assert response.status_code == status
    assert response.json() == {"detail": str(error)}


def test_check_endpoint_runs_real_pipeline(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"lib/a.js": "export function foo() {}\n"})
    repo_builder.write_config({"entryPoints": ["./lib/a.*"], "intentionallyNotDocumented": ["foo"]})
    client = TestClient(create_app())

    response = client.post("/check", json={"config_path": str(repo_builder.path())})

    assert response.status_code == 200
    data = response.json()
    assert data["exit_code"] == 0
    assert data["files"] == ["lib/a.js"]
    assert data["coverage"] == []


def test_check_endpoint_reports_missing_config(tmp_path: Path) -> None:
    client = TestClient(create_app())

    response = client.post("/check", json={"config_path": str(tmp_path)})

    assert response.status_code == 404
