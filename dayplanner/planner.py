"""Assemble a PlannerSession (and sync adapter) for a workspace root."""

from __future__ import annotations

from pathlib import Path

from dayplanner.drive import DriveFolder, load_credentials
from dayplanner.hooks import reminder_notifier, rollover_listener, sync_listener
from dayplanner.rollover import RolloverEngine
from dayplanner.session import PlannerSession
from dayplanner.settings import SettingsStore
from dayplanner.store import PlanStore
from dayplanner.sync import RemoteSyncAdapter
from dayplanner.workspace import (
    get_user_timezone,
    init_workspace,
    load_profile,
    plans_dir,
    settings_path,
    token_path,
    workspace_root,
)


def build_session(root: Path | None = None) -> PlannerSession:
    """Session over the workspace's store, watermark, layout and hooks."""
    if root is None:
        root = workspace_root()
    init_workspace(root)
    profile = load_profile(root)
    store = PlanStore(plans_dir(root))
    engine = RolloverEngine(
        store,
        SettingsStore(settings_path(root)),
        layout=profile.layout,
        on_rollover=rollover_listener(root),
    )
    return PlannerSession(
        store,
        engine,
        layout=profile.layout,
        tz=get_user_timezone(root),
        notifier=reminder_notifier(root),
    )


def build_sync_adapter(root: Path | None = None) -> RemoteSyncAdapter | None:
    """Drive-backed sync adapter, or None when no usable token is stored."""
    if root is None:
        root = workspace_root()
    credentials = load_credentials(token_path(root))
    if credentials is None:
        return None
    sync = load_profile(root).sync
    remote = DriveFolder(credentials, sync.folder_name, timeout=sync.timeout_seconds)
    return RemoteSyncAdapter(
        PlanStore(plans_dir(root)),
        remote,
        settings=SettingsStore(settings_path(root)),
        on_complete=sync_listener(root),
    )
