from __future__ import annotations

from dataclasses import dataclass
import logging

from jiralink.branch_policy import should_skip_branch
from jiralink.config import LintSettings
from jiralink.keys import extract_issue_key
from jiralink.models import IssueRecord, PullRequestContext
from jiralink.observability import log_event
from jiralink.presenter import (
    is_huge_pr,
    is_status_valid,
    render_description,
    render_huge_pr_comment,
    render_invalid_status_comment,
    render_no_key_comment,
    render_title_mismatch_comment,
    title_matches_summary,
)


LOGGER = logging.getLogger("jiralink.lint")


@dataclass(frozen=True)
class LintReport:
    branch: str
    issue_key: str | None
    passed: bool
    skipped: bool = False
    issue_missing: bool = False
    status_valid: bool | None = None
    comments: tuple[str, ...] = ()
    description: str | None = None

    def to_json_dict(self) -> dict[str, object]:
        return {
            "branch": self.branch,
            "issue_key": self.issue_key,
            "passed": self.passed,
            "skipped": self.skipped,
            "issue_missing": self.issue_missing,
            "status_valid": self.status_valid,
            "comments": list(self.comments),
            "description": self.description,
        }


def lint_pull_request(
    request: PullRequestContext,
    issue: IssueRecord | None,
    settings: LintSettings,
) -> LintReport:
    """Decide what to post on a pull request and whether it passes.

    ``issue`` is the record already fetched for the branch's key, or ``None``
    when no key was found or the lookup came back empty.
    """
    if should_skip_branch(request.branch, settings.skip_branches):
        log_event(LOGGER, "branch_skipped", branch=request.branch)
        return _finish(
            LintReport(branch=request.branch, issue_key=None, passed=True, skipped=True)
        )

    key = extract_issue_key(request.branch)
    if key is None:
        log_event(LOGGER, "issue_key_missing", branch=request.branch)
        comments = () if settings.skip_comments else (render_no_key_comment(request.branch),)
        return _finish(
            LintReport(branch=request.branch, issue_key=None, passed=False, comments=comments)
        )

    issue_key = str(key)
    log_event(LOGGER, "issue_key_extracted", branch=request.branch, issue_key=issue_key)
    if issue is None:
        log_event(LOGGER, "issue_record_missing", issue_key=issue_key)
        return _finish(
            LintReport(
                branch=request.branch,
                issue_key=issue_key,
                passed=False,
                issue_missing=True,
            )
        )

    merged = render_description(request.body, issue)
    description = merged if merged != (request.body or "") else None
    log_event(
        LOGGER,
        "description_rendered",
        issue_key=issue_key,
        changed=description is not None,
    )

    allow_list = settings.status_allow_list
    status_valid = is_status_valid(allow_list.enabled, allow_list.statuses, issue)
    comments: list[str] = []
    if not status_valid:
        log_event(
            LOGGER,
            "issue_status_invalid",
            issue_key=issue_key,
            status=issue.status,
            allowed=", ".join(sorted(allow_list.statuses)),
        )
        comments.append(render_invalid_status_comment(issue.status, allow_list.statuses))

    if is_huge_pr(request.additions, settings.pr_threshold):
        log_event(
            LOGGER,
            "pull_request_huge",
            additions=request.additions,
            threshold=settings.pr_threshold,
        )
        comments.append(render_huge_pr_comment(request.additions, settings.pr_threshold))

    if settings.check_title and not title_matches_summary(issue.summary, request.title):
        log_event(LOGGER, "pull_request_title_mismatch", issue_key=issue_key)
        comments.append(render_title_mismatch_comment(issue.summary, request.title))

    return _finish(
        LintReport(
            branch=request.branch,
            issue_key=issue_key,
            passed=status_valid,
            status_valid=status_valid,
            comments=() if settings.skip_comments else tuple(comments),
            description=description,
        )
    )


def _finish(report: LintReport) -> LintReport:
    log_event(
        LOGGER,
        "lint_finished",
        branch=report.branch,
        issue_key=report.issue_key,
        passed=report.passed,
        skipped=report.skipped,
        comment_count=len(report.comments),
    )
    return report
