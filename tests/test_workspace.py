"""Tests for workspace config, paths and logging setup."""

import logging

import pytest

from dayplanner.log import configure_logging
from dayplanner.workspace import (
    get_user_timezone,
    init_workspace,
    load_profile,
    token_path,
    workspace_root,
)


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()


def test_load_profile(workspace):
    profile = load_profile(workspace)
    assert profile.timezone == "UTC"
    assert profile.sync.timeout_seconds == 5.0
    assert profile.layout.tasks == 8


@pytest.mark.parametrize("content", [
    "timezone: [unclosed",
    "layout:\n  first_hour: 22\n  last_hour: 6\n",
    "- just\n- a list\n",
])
def test_bad_profile_falls_back_to_defaults(workspace, content):
    (workspace / "profile.yaml").write_text(content, encoding="utf-8")
    profile = load_profile(workspace)
    assert profile.timezone == "UTC"
    assert profile.layout.first_hour == 7


def test_unknown_timezone_falls_back(workspace):
    (workspace / "profile.yaml").write_text("timezone: Mars/Olympus\n", encoding="utf-8")
    assert str(get_user_timezone(workspace)) == "UTC"


def test_token_path_relative_and_absolute(workspace, tmp_path):
    assert token_path(workspace) == workspace / "token.json"
    elsewhere = tmp_path / "secrets" / "tok.json"
    (workspace / "profile.yaml").write_text(f"sync:\n  token_path: {elsewhere}\n", encoding="utf-8")
    assert token_path(workspace) == elsewhere


def test_init_workspace_creates_layout(tmp_path):
    root = init_workspace(tmp_path / "fresh")
    assert (root / "plans").is_dir()
    assert (root / "logs").is_dir()
    assert load_profile(root).layout.last_hour == 23


@pytest.fixture
def clean_logger():
    logger = logging.getLogger("dayplanner")
    saved = list(logger.handlers)
    for h in saved:
        logger.removeHandler(h)
    yield logger
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    for h in saved:
        logger.addHandler(h)


def test_configure_logging_is_idempotent(workspace, clean_logger):
    configure_logging(workspace)
    configure_logging(workspace)
    assert len(clean_logger.handlers) == 1

    logging.getLogger("dayplanner.test").info("hello from the test")
    clean_logger.handlers[0].flush()
    text = (workspace / "logs" / "dayplanner.log").read_text(encoding="utf-8")
    assert "[INFO] dayplanner.test: hello from the test" in text
