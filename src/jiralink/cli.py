from __future__ import annotations

import argparse
import json
from pathlib import Path

from jiralink.config import AppConfig, load_config
from jiralink.jira_payload import issue_from_jira_payload
from jiralink.keys import extract_issue_keys
from jiralink.lint import lint_pull_request
from jiralink.models import IssueRecord, PullRequestContext
from jiralink.observability import configure_logging
from jiralink.presenter import render_description


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jiralink")
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract", help="Print the issue key found at the start of a branch name"
    )
    extract_parser.add_argument("branch", type=str)
    extract_parser.add_argument(
        "--json", action="store_true", help="Print the extracted keys as a JSON list"
    )
    _add_verbose_flag(extract_parser)

    render_parser = subparsers.add_parser(
        "render", help="Render the pull request description for a fetched issue"
    )
    render_parser.add_argument("--config", type=Path, default=Path("jiralink.toml"))
    render_parser.add_argument(
        "--issue-json",
        type=Path,
        required=True,
        help="Path to a Jira issue payload saved from the REST API",
    )
    render_parser.add_argument(
        "--body-file", type=Path, help="Current pull request description to merge into"
    )
    _add_verbose_flag(render_parser)

    lint_parser = subparsers.add_parser(
        "lint", help="Check a pull request branch against its linked issue"
    )
    lint_parser.add_argument("--config", type=Path, default=Path("jiralink.toml"))
    lint_parser.add_argument("--branch", type=str, required=True)
    lint_parser.add_argument(
        "--issue-json",
        type=Path,
        help="Path to the Jira issue payload for the branch's key, if one was found",
    )
    lint_parser.add_argument("--body-file", type=Path, help="Current pull request description")
    lint_parser.add_argument("--title", type=str, default="", help="Pull request title")
    lint_parser.add_argument(
        "--additions", type=int, default=0, help="Lines added by the pull request"
    )
    lint_parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    _add_verbose_flag(lint_parser)

    return parser


def main() -> None:
    args = build_parser().parse_args()
    configure_logging(bool(getattr(args, "verbose", False)))

    if args.command == "extract":
        _cmd_extract(str(args.branch), as_json=bool(args.json))
        return

    config = load_config(args.config)
    if args.command == "render":
        _cmd_render(config, issue_json=args.issue_json, body_file=args.body_file)
        return
    if args.command == "lint":
        _cmd_lint(config, args)
        return

    raise RuntimeError(f"Unknown command: {args.command}")


def _add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging to stderr",
    )


def _cmd_extract(branch: str, *, as_json: bool) -> None:
    keys = extract_issue_keys(branch)
    if as_json:
        print(json.dumps([str(key) for key in keys]))
    else:
        for key in keys:
            print(key)
    if not keys:
        raise SystemExit(1)


def _cmd_render(config: AppConfig, *, issue_json: Path, body_file: Path | None) -> None:
    issue = _load_issue(config, issue_json)
    print(render_description(_read_optional_text(body_file), issue))


def _cmd_lint(config: AppConfig, args: argparse.Namespace) -> None:
    issue = _load_issue(config, args.issue_json) if args.issue_json is not None else None
    request = PullRequestContext(
        branch=str(args.branch),
        title=str(args.title),
        body=_read_optional_text(args.body_file),
        additions=int(args.additions),
    )
    report = lint_pull_request(request, issue, config.lint)

    if args.json:
        print(json.dumps(report.to_json_dict(), indent=2))
    else:
        _print_report_summary(report.passed, report.skipped, report.issue_key, report.comments)

    if not report.passed and config.lint.fail_on_error:
        raise SystemExit(1)


def _print_report_summary(
    passed: bool, skipped: bool, issue_key: str | None, comments: tuple[str, ...]
) -> None:
    if skipped:
        print("Branch skipped.")
        return
    print(f"issue_key={issue_key or '<none>'} passed={'true' if passed else 'false'}")
    for comment in comments:
        print()
        print(comment)


def _load_issue(config: AppConfig, path: Path) -> IssueRecord:
    payload = json.loads(path.read_text(encoding="utf-8"))
    return issue_from_jira_payload(
        payload,
        base_url=config.jira.base_url,
        estimate_field=config.jira.estimate_field,
    )


def _read_optional_text(path: Path | None) -> str | None:
    if path is None:
        return None
    return path.read_text(encoding="utf-8")
