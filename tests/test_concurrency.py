from __future__ import annotations

import asyncio
import threading

from fastapi.testclient import TestClient

from wordhunt.features.session import SessionManager, concurrency
from wordhunt.features.session.concurrency import WORKERS_ENV_VAR, run_blocking, shutdown_executor, worker_count
from wordhunt.web.app import create_app


def test_worker_count_honours_env_override() -> None:
    assert worker_count({WORKERS_ENV_VAR: "3"}) == 3
    assert worker_count({WORKERS_ENV_VAR: "0"}) == 1
    default = worker_count({})
    assert 1 <= default <= 8
    assert worker_count({WORKERS_ENV_VAR: "lots"}) == default


def test_run_blocking_uses_session_threads_and_restarts_after_shutdown() -> None:
    name = asyncio.run(run_blocking(lambda: threading.current_thread().name))
    assert name.startswith("wordhunt-session")

    shutdown_executor()
    assert concurrency._executor is None
    assert asyncio.run(run_blocking(sum, [1, 2, 3])) == 6
    assert concurrency._executor is not None


def test_app_shutdown_releases_executor(pool) -> None:
    with TestClient(create_app(SessionManager(pool_source=lambda: pool))) as client:
        assert client.post("/api/v1/session", json={"seed": 4}).status_code == 200
        assert concurrency._executor is not None
    assert concurrency._executor is None
