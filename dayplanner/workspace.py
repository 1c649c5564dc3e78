"""Workspace root, timezone, profile and path helpers for DayPlanner."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from dayplanner.fileio import read_yaml, write_yaml_atomic
from dayplanner.models import Profile

logger = logging.getLogger("dayplanner.workspace")


def workspace_root() -> Path:
    """Get the workspace root directory (contains plans/ and the config files)."""
    return Path(
        os.environ.get("DAYPLANNER_ROOT", str(Path.home() / "dayplanner"))
    ).expanduser().resolve()


def load_profile(root: Path | None = None) -> Profile:
    """Load profile.yaml; a missing or unreadable profile yields defaults."""
    if root is None:
        root = workspace_root()
    try:
        return Profile.from_dict(read_yaml(profile_path(root)))
    except (OSError, ValueError, TypeError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable profile %s: %s", profile_path(root), exc)
        return Profile()


def init_workspace(root: Path | None = None) -> Path:
    """Create the workspace layout and a default profile if none exists."""
    if root is None:
        root = workspace_root()
    plans_dir(root).mkdir(parents=True, exist_ok=True)
    logs_dir(root).mkdir(parents=True, exist_ok=True)
    if not profile_path(root).exists():
        write_yaml_atomic(profile_path(root), Profile().to_dict())
    return root


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from profile.yaml, defaulting to UTC."""
    name = load_profile(root).timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r in profile, using UTC", name)
        return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    return datetime.now(get_user_timezone(root))


# ── Path helpers ──────────────────────────────────────────────

def plans_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "plans"


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.json"


def profile_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "profile.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"


def logs_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "logs"


def token_path(root: Path | None = None) -> Path:
    """OAuth token file; relative ``sync.token_path`` values resolve against the root."""
    if root is None:
        root = workspace_root()
    configured = Path(load_profile(root).sync.token_path).expanduser()
    return configured if configured.is_absolute() else root / configured
