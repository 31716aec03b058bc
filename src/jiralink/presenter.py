from __future__ import annotations

from collections.abc import Collection, Iterable

from jiralink.description import merge_description, wrap_block
from jiralink.models import IssueLabel, IssueRecord


VALID_BRANCH_EXAMPLES: tuple[str, ...] = (
    "ABC-123",
    "ABC-123-short-description",
    "ABC-123/short_description",
    "feature/ABC-123-short-description",
    "fix/abc-123-login-redirect",
)


def render_labels(labels: Iterable[IssueLabel]) -> str:
    return ", ".join(
        f'<a href="{label.url}" title="{label.name}">{label.name}</a>' for label in labels
    )


def render_estimate(estimate: int | float | None) -> str:
    if estimate is None:
        return "N/A"
    if isinstance(estimate, float) and estimate.is_integer():
        return str(int(estimate))
    return str(estimate)


def render_issue_block(issue: IssueRecord) -> str:
    labels = render_labels(issue.labels) or "None"
    content = f"""
<details open>
  <summary><a href="{issue.url}" title="{issue.key}" target="_blank">{issue.key}</a></summary>
  <br />
  <table>
    <tr>
      <th>Summary</th>
      <td>{issue.summary}</td>
    </tr>
    <tr>
      <th>Type</th>
      <td>
        <img alt="{issue.type.name}" src="{issue.type.icon_url}" />
        {issue.type.name}
      </td>
    </tr>
    <tr>
      <th>Status</th>
      <td>{issue.status}</td>
    </tr>
    <tr>
      <th>Points</th>
      <td>{render_estimate(issue.estimate)}</td>
    </tr>
    <tr>
      <th>Labels</th>
      <td>{labels}</td>
    </tr>
  </table>
</details>
"""
    return wrap_block(content)


def render_description(existing_body: str | None, issue: IssueRecord) -> str:
    return merge_description(existing_body, render_issue_block(issue))


def render_no_key_comment(branch: str) -> str:
    examples = "\n".join(f"  - <code>{example}</code>" for example in VALID_BRANCH_EXAMPLES)
    return f"""
<p>An issue key is missing from the start of your branch name.</p>
<p>Your branch: <code>{branch}</code></p>
<p>The key must come first, optionally after a single prefix such as <code>feature/</code> or <code>fix/</code>.
Keys that appear later in the branch name are ignored.</p>
<details><summary>Valid sample branch names</summary>

{examples}
</details>
""".strip()


def render_invalid_status_comment(current_status: str, allowed_statuses: Collection[str]) -> str:
    allowed = ", ".join(sorted(allowed_statuses)) or "None"
    return f"""
<p>The linked issue is not in one of the allowed statuses.</p>
<table>
  <tr>
    <th>Detected status</th>
    <td>{current_status}</td>
    <td>:x:</td>
  </tr>
  <tr>
    <th>Allowed statuses</th>
    <td>{allowed}</td>
    <td>:heavy_check_mark:</td>
  </tr>
</table>
<p>Move the issue to an allowed status and re-run the check.</p>
""".strip()


def is_status_valid(
    validation_enabled: bool, allowed_statuses: Collection[str], issue: IssueRecord
) -> bool:
    if not validation_enabled:
        return True
    return issue.status in allowed_statuses


def is_huge_pr(additions: int, threshold: int) -> bool:
    if threshold <= 0:
        return False
    return additions > threshold


def render_huge_pr_comment(additions: int, threshold: int) -> str:
    return f"""
<p>This pull request adds {additions} lines, above the review threshold of {threshold}.</p>
<p>Smaller pull requests are quicker to review and safer to merge. Consider splitting this change.</p>
""".strip()


def title_matches_summary(issue_summary: str, pr_title: str) -> bool:
    summary = _normalize_words(issue_summary)
    if not summary:
        return True
    return summary in _normalize_words(pr_title)


def render_title_mismatch_comment(issue_summary: str, pr_title: str) -> str:
    return f"""
<p>The pull request title does not mention the issue summary.</p>
<table>
  <tr>
    <th>Issue summary</th>
    <td>{issue_summary}</td>
  </tr>
  <tr>
    <th>Pull request title</th>
    <td>{pr_title}</td>
  </tr>
</table>
""".strip()


def _normalize_words(text: str) -> str:
    return " ".join(text.lower().split())
