from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)

_running_tasks: dict[str, asyncio.Task[Any]] = {}


def start_task(session_id: str, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
    """Create an asyncio task and register it by session ID."""
    task = asyncio.create_task(coro, name=f"generate-{session_id}")
    _running_tasks[session_id] = task
    task.add_done_callback(lambda _: _running_tasks.pop(session_id, None))
    logger.info("Started generation %s", session_id)
    return task


def get_task(session_id: str) -> asyncio.Task[Any] | None:
    return _running_tasks.get(session_id)


def is_running(session_id: str) -> bool:
    task = _running_tasks.get(session_id)
    return task is not None and not task.done()
