from __future__ import annotations

import logging
from typing import cast
from urllib.parse import quote

from jiralink.models import IssueLabel, IssueProject, IssueRecord, IssueType
from jiralink.observability import log_event


LOGGER = logging.getLogger("jiralink.jira_payload")
DEFAULT_ESTIMATE_FIELD = "customfield_10016"


class IssuePayloadError(ValueError):
    """Issue-tracker payload that cannot be turned into an IssueRecord."""


def issue_from_jira_payload(
    payload: object,
    *,
    base_url: str,
    estimate_field: str = DEFAULT_ESTIMATE_FIELD,
) -> IssueRecord:
    """Build an IssueRecord from a Jira ``GET /rest/api/2/issue/{key}`` response.

    Only ``key`` is mandatory. Missing ``fields`` entries degrade to empty
    strings, an empty label tuple, or a ``None`` estimate.
    """
    payload_obj = _as_object_dict(payload)
    if payload_obj is None:
        raise IssuePayloadError("Unexpected Jira response: expected object for issue")
    key = _as_string(payload_obj.get("key")).strip()
    if not key:
        raise IssuePayloadError("Unexpected Jira response: issue key is missing")

    root = base_url.rstrip("/")
    fields = _as_object_dict(payload_obj.get("fields")) or {}
    issuetype = _as_object_dict(fields.get("issuetype")) or {}
    project = _as_object_dict(fields.get("project")) or {}
    status = _as_object_dict(fields.get("status")) or {}
    project_key = _as_string(project.get("key"))

    record = IssueRecord(
        key=key,
        url=f"{root}/browse/{key}",
        type=IssueType(
            name=_as_string(issuetype.get("name")),
            icon_url=_as_string(issuetype.get("iconUrl")),
        ),
        estimate=_as_optional_number(fields.get(estimate_field)),
        labels=tuple(
            IssueLabel(name=name, url=label_url(root, name))
            for name in _as_label_names(fields.get("labels"))
        ),
        summary=_as_string(fields.get("summary")),
        project=IssueProject(
            name=_as_string(project.get("name")),
            url=f"{root}/browse/{project_key}" if project_key else "",
            key=project_key,
        ),
        status=_as_string(status.get("name")),
    )
    log_event(
        LOGGER,
        "jira_issue_parsed",
        issue_key=record.key,
        status=record.status,
        label_count=len(record.labels),
        has_estimate=record.estimate is not None,
    )
    return record


def label_url(base_url: str, name: str) -> str:
    return f"{base_url.rstrip('/')}/issues/?jql={quote(f'labels={name}', safe='')}"


def _as_object_dict(value: object) -> dict[str, object] | None:
    if not isinstance(value, dict):
        return None
    if not all(isinstance(key, str) for key in value.keys()):
        return None
    return cast(dict[str, object], value)


def _as_string(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _as_optional_number(value: object) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return value
    return None


def _as_label_names(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str) and item)
