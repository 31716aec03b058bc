from __future__ import annotations

from dataclasses import replace
import re

import pytest

from jiralink.config import LintSettings
from jiralink.description import HIDDEN_MARKER_START
from jiralink.lint import LintReport, lint_pull_request
from jiralink.models import (
    IssueLabel,
    IssueProject,
    IssueRecord,
    IssueType,
    PullRequestContext,
)
from jiralink.observability import configure_logging
from jiralink.presenter import render_description


def _issue(status: str = "In Progress", summary: str = "Fix login") -> IssueRecord:
    return IssueRecord(
        key="ES-43",
        url="https://jira.example/browse/ES-43",
        type=IssueType(name="Bug", icon_url="https://jira.example/bug.svg"),
        estimate=3,
        labels=(IssueLabel(name="auth", url="https://jira.example/label/auth"),),
        summary=summary,
        project=IssueProject(name="Eng", url="https://jira.example/browse/ES", key="ES"),
        status=status,
    )


def _settings(**overrides: object) -> LintSettings:
    return replace(LintSettings(), **overrides)  # type: ignore[arg-type]


def test_lint_skips_bot_and_configured_branches() -> None:
    report = lint_pull_request(PullRequestContext(branch="dependabot/pip/x"), None, _settings())
    assert report == LintReport(
        branch="dependabot/pip/x", issue_key=None, passed=True, skipped=True
    )

    custom = _settings(skip_branches=re.compile(r"^release/"))
    assert lint_pull_request(PullRequestContext(branch="release/1.2"), None, custom).skipped


def test_lint_reports_missing_key_with_comment() -> None:
    report = lint_pull_request(PullRequestContext(branch="update-readme"), None, _settings())

    assert report.passed is False
    assert report.issue_key is None
    assert len(report.comments) == 1
    assert "update-readme" in report.comments[0]
    assert report.description is None


def test_lint_skip_comments_suppresses_comments_but_not_verdict() -> None:
    report = lint_pull_request(
        PullRequestContext(branch="update-readme"), None, _settings(skip_comments=True)
    )

    assert report.passed is False
    assert report.comments == ()


def test_lint_flags_key_without_fetched_issue() -> None:
    report = lint_pull_request(PullRequestContext(branch="feature/es-43-x"), None, _settings())

    assert report.issue_key == "ES-43"
    assert report.issue_missing is True
    assert report.passed is False
    assert report.description is None


def test_lint_renders_description_for_valid_issue() -> None:
    request = PullRequestContext(branch="fix/ES-43-login", title="Fix login", body="Notes")

    report = lint_pull_request(request, _issue(), _settings(validate_issue_status=True))

    assert report.passed is True
    assert report.status_valid is True
    assert report.comments == ()
    assert report.description is not None
    assert report.description.startswith("Notes\n\n")
    assert HIDDEN_MARKER_START in report.description


def test_lint_leaves_up_to_date_description_alone() -> None:
    body = render_description("Notes", _issue())
    request = PullRequestContext(branch="ES-43", body=body)

    report = lint_pull_request(request, _issue(), _settings())

    assert report.description is None
    assert report.passed is True


def test_lint_fails_on_invalid_status() -> None:
    settings = _settings(
        validate_issue_status=True,
        allowed_issue_statuses=frozenset({"In Progress", "In Test"}),
    )

    report = lint_pull_request(PullRequestContext(branch="ES-43"), _issue("Assessment"), settings)

    assert report.passed is False
    assert report.status_valid is False
    assert len(report.comments) == 1
    assert "Assessment" in report.comments[0]
    assert "In Progress, In Test" in report.comments[0]
    assert report.description is not None


def test_lint_ignores_status_when_validation_disabled() -> None:
    report = lint_pull_request(PullRequestContext(branch="ES-43"), _issue("Assessment"), _settings())

    assert report.passed is True
    assert report.status_valid is True


def test_lint_adds_advisory_comments_without_failing() -> None:
    request = PullRequestContext(branch="ES-43", title="Update docs", additions=2000)

    report = lint_pull_request(request, _issue(), _settings(check_title=True, pr_threshold=1000))

    assert report.passed is True
    assert len(report.comments) == 2
    assert "2000" in report.comments[0]
    assert "Update docs" in report.comments[1]


def test_lint_emits_events(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(verbose=True)
    try:
        lint_pull_request(PullRequestContext(branch="ES-43"), _issue(), _settings())
    finally:
        configure_logging(verbose=False)

    stderr = capsys.readouterr().err
    assert "event=issue_key_extracted" in stderr
    assert "issue_key=ES-43" in stderr
    assert "event=lint_finished" in stderr


def test_lint_report_to_json_dict() -> None:
    report = LintReport(branch="b", issue_key="ES-1", passed=False, comments=("c",))

    assert report.to_json_dict() == {
        "branch": "b",
        "issue_key": "ES-1",
        "passed": False,
        "skipped": False,
        "issue_missing": False,
        "status_valid": None,
        "comments": ["c"],
        "description": None,
    }
