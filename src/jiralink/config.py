from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
import tomllib
from typing import cast

from jiralink.jira_payload import DEFAULT_ESTIMATE_FIELD
from jiralink.models import StatusAllowList


DEFAULT_ALLOWED_STATUSES: tuple[str, ...] = ("In Progress",)
DEFAULT_PR_THRESHOLD = 800


@dataclass(frozen=True)
class JiraConfig:
    base_url: str
    estimate_field: str = DEFAULT_ESTIMATE_FIELD


@dataclass(frozen=True)
class LintSettings:
    skip_branches: re.Pattern[str] | None = None
    skip_comments: bool = False
    pr_threshold: int = DEFAULT_PR_THRESHOLD
    validate_issue_status: bool = False
    allowed_issue_statuses: frozenset[str] = frozenset(DEFAULT_ALLOWED_STATUSES)
    check_title: bool = False
    fail_on_error: bool = True

    @property
    def status_allow_list(self) -> StatusAllowList:
        return StatusAllowList(
            enabled=self.validate_issue_status,
            statuses=self.allowed_issue_statuses,
        )


@dataclass(frozen=True)
class AppConfig:
    jira: JiraConfig
    lint: LintSettings


class ConfigError(ValueError):
    pass


def load_config(path: Path) -> AppConfig:
    with path.open("rb") as fh:
        data = tomllib.load(fh)

    jira_data = _require_table(data, "jira")
    lint_data = _optional_table(data, "lint") or {}

    jira = JiraConfig(
        base_url=_require_str(jira_data, "base_url").rstrip("/"),
        estimate_field=_str_with_default(jira_data, "estimate_field", DEFAULT_ESTIMATE_FIELD),
    )
    lint = LintSettings(
        skip_branches=_optional_pattern(lint_data, "skip_branches"),
        skip_comments=_bool_with_default(lint_data, "skip_comments", False),
        pr_threshold=_int_with_default(lint_data, "pr_threshold", DEFAULT_PR_THRESHOLD),
        validate_issue_status=_bool_with_default(lint_data, "validate_issue_status", False),
        allowed_issue_statuses=_statuses_with_default(
            lint_data, "allowed_issue_statuses", DEFAULT_ALLOWED_STATUSES
        ),
        check_title=_bool_with_default(lint_data, "check_title", False),
        fail_on_error=_bool_with_default(lint_data, "fail_on_error", True),
    )

    if lint.pr_threshold < 0:
        raise ConfigError("lint.pr_threshold must be >= 0")
    if lint.validate_issue_status and not lint.allowed_issue_statuses:
        raise ConfigError(
            "lint.allowed_issue_statuses must not be empty when validate_issue_status is true"
        )

    return AppConfig(jira=jira, lint=lint)


def _require_table(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise ConfigError(f"[{key}] is required and must be a TOML table")
    return cast(dict[str, object], value)


def _optional_table(data: dict[str, object], key: str) -> dict[str, object] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError(f"[{key}] must be a TOML table when provided")
    return cast(dict[str, object], value)


def _require_str(data: dict[str, object], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{key} is required and must be a non-empty string")
    return value


def _str_with_default(data: dict[str, object], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{key} must be a non-empty string")
    return value


def _int_with_default(data: dict[str, object], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer")
    return value


def _bool_with_default(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be a boolean")
    return value


def _optional_pattern(data: dict[str, object], key: str) -> re.Pattern[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{key} must be a non-empty string if provided")
    try:
        return re.compile(value)
    except re.error as exc:
        raise ConfigError(f"{key} is not a valid regular expression: {exc}") from exc


def _statuses_with_default(
    data: dict[str, object], key: str, default: tuple[str, ...]
) -> frozenset[str]:
    value = data.get(key, list(default))
    if not isinstance(value, list):
        raise ConfigError(f"{key} must be a list of strings")
    out: set[str] = set()
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ConfigError(f"{key} entries must be non-empty strings")
        # Statuses compare case-sensitively; only surrounding whitespace is dropped.
        out.add(item.strip())
    return frozenset(out)
