from __future__ import annotations

import re


BOT_BRANCH_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^dependabot/"),
    re.compile(r"^renovate/"),
)
LONG_LIVED_BRANCH_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^main$"),
    re.compile(r"^master$"),
    re.compile(r"^production$"),
    re.compile(r"^staging$"),
    re.compile(r"^gh-pages$"),
)


def should_skip_branch(branch: str, extra_pattern: re.Pattern[str] | None = None) -> bool:
    for pattern in BOT_BRANCH_PATTERNS + LONG_LIVED_BRANCH_PATTERNS:
        if pattern.search(branch):
            return True
    if extra_pattern is not None and extra_pattern.search(branch):
        return True
    return False
