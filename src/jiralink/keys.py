from __future__ import annotations

import re

from jiralink.models import IssueKey


# One branch-type segment such as "feature/" or "fix/". No hyphens, so a key
# followed by "/" is never mistaken for a prefix.
_PREFIX_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_.]*/")
_ANCHORED_KEY_PATTERN = re.compile(r"([A-Za-z][A-Za-z0-9]*)-([0-9]+)(?=[-/]|\Z)")
_CANONICAL_KEY_PATTERN = re.compile(r"([A-Za-z][A-Za-z0-9]*)-([0-9]+)")


def strip_branch_prefix(branch: str) -> str:
    match = _PREFIX_PATTERN.match(branch)
    if match is None:
        return branch
    return branch[match.end() :]


def extract_issue_keys(branch: str) -> tuple[IssueKey, ...]:
    """Return the issue key anchored at the start of ``branch``.

    At most one leading prefix segment is consumed before the key must match.
    Nothing past the first match is inspected, so the result holds zero or one
    keys.
    """
    if not branch:
        return ()
    match = _ANCHORED_KEY_PATTERN.match(strip_branch_prefix(branch))
    if match is None:
        return ()
    return (IssueKey(project_key=match.group(1).upper(), number=match.group(2)),)


def extract_issue_key(branch: str) -> IssueKey | None:
    keys = extract_issue_keys(branch)
    if not keys:
        return None
    return keys[0]


def parse_issue_key(text: str) -> IssueKey | None:
    match = _CANONICAL_KEY_PATTERN.fullmatch(text.strip())
    if match is None:
        return None
    return IssueKey(project_key=match.group(1).upper(), number=match.group(2))
