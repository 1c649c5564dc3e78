"""Plugin/hook system for DayPlanner.

Lifecycle hooks run shell commands at key points in the system.
Configured via hooks.yaml in the workspace root.

Hook points:
- post_rollover
- on_tasks_changed (pending tasks for a reminder scheduler)
- post_sync_push, post_sync_pull
"""

from __future__ import annotations

import json
import logging
import subprocess
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterator

import yaml

from dayplanner.fileio import read_yaml
from dayplanner.models import TaskItem
from dayplanner.workspace import hooks_config_path, workspace_root

logger = logging.getLogger("dayplanner.hooks")

VALID_HOOK_POINTS = {
    "post_rollover",
    "on_tasks_changed",
    "post_sync_push",
    "post_sync_pull",
}

DEFAULT_TIMEOUT = 30
OUTPUT_LIMIT = 4096


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    """hooks.yaml as a dict; a missing or unparsable file means no hooks."""
    if root is None:
        root = workspace_root()
    path = hooks_config_path(root)
    try:
        return read_yaml(path)
    except yaml.YAMLError as exc:
        logger.warning("Ignoring unreadable %s: %s", path.name, exc)
        return {}


def _entries(config: dict[str, Any], hook_point: str) -> Iterator[tuple[str, float]]:
    """(command, timeout) pairs; entries are a bare command or {command, timeout}."""
    hooks = config.get(hook_point)
    if not isinstance(hooks, list):
        return
    for hook in hooks:
        if isinstance(hook, dict):
            command, timeout = hook.get("command"), hook.get("timeout", DEFAULT_TIMEOUT)
        else:
            command, timeout = hook, DEFAULT_TIMEOUT
        if isinstance(command, str) and command.strip():
            yield command, timeout


def _run_one(command: str, timeout: float, payload: str, root: Path) -> dict[str, Any]:
    try:
        proc = subprocess.run(
            command,
            shell=True,
            input=payload,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(root),
        )
    except subprocess.TimeoutExpired:
        logger.warning("Hook %r timed out after %ss", command, timeout)
        return {"exit_code": -1, "error": f"Hook timed out after {timeout}s"}
    except OSError as exc:
        logger.warning("Hook %r failed to start: %s", command, exc)
        return {"exit_code": -1, "error": str(exc)}

    if proc.returncode != 0:
        logger.warning("Hook %r exited with %d", command, proc.returncode)
    return {
        "exit_code": proc.returncode,
        "stdout": proc.stdout[:OUTPUT_LIMIT],
        "stderr": proc.stderr[:OUTPUT_LIMIT],
    }


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run every command registered for *hook_point*, in order.

    *context* goes to each command as JSON on stdin. A failing or hanging
    hook is reported in its result and never stops the ones after it.
    """
    if hook_point not in VALID_HOOK_POINTS:
        return []
    if root is None:
        root = workspace_root()

    payload = json.dumps(context, ensure_ascii=False)
    return [
        {"command": command, "hook_point": hook_point, **_run_one(command, timeout, payload, root)}
        for command, timeout in _entries(load_hooks_config(root), hook_point)
    ]


def reminder_notifier(root: Path | None = None) -> Callable[[date, list[TaskItem]], None]:
    """Session notifier that hands pending tasks to ``on_tasks_changed`` hooks."""

    def notify(day: date, pending: list[TaskItem]) -> None:
        run_hooks(
            "on_tasks_changed",
            {"day": day.isoformat(), "pending": [t.text for t in pending], "count": len(pending)},
            root,
        )

    return notify


def rollover_listener(root: Path | None = None) -> Callable[[dict[str, Any]], None]:
    """RolloverEngine listener that fires ``post_rollover`` with the result."""

    def listen(result: dict[str, Any]) -> None:
        run_hooks("post_rollover", result, root)

    return listen


def sync_listener(root: Path | None = None) -> Callable[[Any], None]:
    """RemoteSyncAdapter listener that fires ``post_sync_push`` / ``post_sync_pull``."""

    def listen(report: Any) -> None:
        run_hooks(f"post_sync_{report.direction}", report.to_dict(), root)

    return listen
