from __future__ import annotations

import re


HIDDEN_MARKER_START = "<!-- jiralink:start -->"
HIDDEN_MARKER_END = "<!-- jiralink:end -->"
# An unterminated block runs to the end of the text.
_BLOCK_PATTERN = re.compile(
    rf"{re.escape(HIDDEN_MARKER_START)}.*?(?:{re.escape(HIDDEN_MARKER_END)}|\Z)",
    re.DOTALL,
)


def contains_marker(text: str | None) -> bool:
    if not text:
        return False
    return HIDDEN_MARKER_START in text


def should_update_description(body: str | None) -> bool:
    return not contains_marker(body)


def wrap_block(content: str) -> str:
    return f"{HIDDEN_MARKER_START}\n{content.strip()}\n{HIDDEN_MARKER_END}"


def merge_description(existing_body: str | None, block: str) -> str:
    """Place ``block`` into ``existing_body`` exactly once.

    A previously merged block is replaced where it stands and any stray
    duplicates are dropped. Otherwise the block is appended after a blank line,
    or returned alone when there is no existing text.
    """
    wrapped = _ensure_wrapped(block)
    body = existing_body or ""
    matches = list(_BLOCK_PATTERN.finditer(body))
    if not matches:
        stripped = body.rstrip()
        if not stripped.strip():
            return wrapped
        return f"{stripped}\n\n{wrapped}"

    first = matches[0]
    remainder = _BLOCK_PATTERN.sub("", body[first.end() :])
    return f"{body[: first.start()]}{wrapped}{remainder}"


def split_description(body: str | None) -> tuple[str, str | None]:
    """Return the human-authored text and the first generated block, if any."""
    text = body or ""
    match = _BLOCK_PATTERN.search(text)
    if match is None:
        return text, None
    human = text[: match.start()] + _BLOCK_PATTERN.sub("", text[match.end() :])
    return human.strip(), match.group(0)


def _ensure_wrapped(block: str) -> str:
    stripped = block.strip()
    if (
        stripped.startswith(HIDDEN_MARKER_START)
        and stripped.endswith(HIDDEN_MARKER_END)
        and stripped.count(HIDDEN_MARKER_START) == 1
        and stripped.count(HIDDEN_MARKER_END) == 1
    ):
        return stripped
    content = stripped.replace(HIDDEN_MARKER_START, "").replace(HIDDEN_MARKER_END, "")
    return wrap_block(content)
