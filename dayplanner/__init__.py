"""DayPlanner core library: per-date plan storage, daily rollover, sync.

Public API re-exports for convenient imports:
    from dayplanner import PlanStore, RolloverEngine, PlannerSession, ...
"""

# Workspace & paths
from dayplanner.workspace import (
    workspace_root,
    load_profile,
    init_workspace,
    get_user_timezone,
    now_local,
    plans_dir,
    settings_path,
    profile_path,
    hooks_config_path,
    logs_dir,
    token_path,
)

# File I/O
from dayplanner.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_text_atomic,
    write_json_atomic,
    write_yaml_atomic,
)

# Dates
from dayplanner.datekey import (
    today,
    from_instant,
    to_filename,
    from_filename,
    parse_date,
    with_month,
    classify,
)

# Models
from dayplanner.models import (
    HABITS,
    MOODS,
    TaskItem,
    PriorityItem,
    HourlySlot,
    DayPlan,
    PlanLayout,
    SyncConfig,
    Profile,
    Settings,
    CalendarEvent,
)

# Storage
from dayplanner.store import PlanStore, encode_plan, decode_plan
from dayplanner.settings import SettingsStore

# Rollover
from dayplanner.rollover import (
    RolloverEngine,
    normalize_text,
    collect_carry_forward,
    merge_carry_forward,
)

# Session
from dayplanner.session import PlannerSession

# Sync
from dayplanner.sync import RemoteFolder, RemoteSyncAdapter, SyncReport, FileResult
from dayplanner.drive import DriveFolder, load_credentials

# Calendar feed
from dayplanner.calendar_feed import parse_google_events, events_on

# Hooks
from dayplanner.hooks import run_hooks, reminder_notifier, rollover_listener, sync_listener

# Logging
from dayplanner.log import configure_logging

# Wiring
from dayplanner.planner import build_session, build_sync_adapter
