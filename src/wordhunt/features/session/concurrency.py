"""Thread offload for the session manager's blocking calls.

Pool loading and round planning run off the event loop on a small shared
executor.  ``WORDHUNT_SESSION_WORKERS`` overrides its size; the web app shuts
it down on exit and the next call starts a fresh one.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any

logger = logging.getLogger(__name__)

WORKERS_ENV_VAR = "WORDHUNT_SESSION_WORKERS"
_DEFAULT_MAX_WORKERS = 8

_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def worker_count(env: Mapping[str, str] | None = None) -> int:
    source = os.environ if env is None else env
    raw = source.get(WORKERS_ENV_VAR, "").strip()
    if raw:
        try:
            return max(1, int(raw))
        except ValueError:
            logger.warning("Ignoring non-integer %s", WORKERS_ENV_VAR, extra={"value": raw})
    return max(1, min(_DEFAULT_MAX_WORKERS, os.cpu_count() or 1))


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=worker_count(), thread_name_prefix="wordhunt-session")
        return _executor


def shutdown_executor() -> None:
    global _executor
    with _executor_lock:
        executor, _executor = _executor, None
    if executor is not None:
        executor.shutdown(wait=True)


async def run_blocking(func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
    loop = asyncio.get_running_loop()
    bound = partial(func, *args, **kwargs)
    return await loop.run_in_executor(_get_executor(), bound)
