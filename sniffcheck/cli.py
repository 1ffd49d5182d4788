"""Command-line entry point dispatching to the individual checks."""

from __future__ import annotations

import argparse
from typing import Sequence

from sniffcheck import deploy, env, imports_analyzer, large, memory, menu


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", help="print the report as JSON")
    common.add_argument(
        "-q", "--quiet", action="store_true", help="print less decoration"
    )
    common.add_argument(
        "-C",
        "--directory",
        default=None,
        help="project directory to check (default: current directory)",
    )

    parser = argparse.ArgumentParser(
        prog="sniff", description="Opinionated TypeScript/Next.js development toolkit"
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("menu", help="show the available tools")
    large_parser = sub.add_parser(
        "large", parents=[common], help="find files with too many lines"
    )
    large_parser.add_argument(
        "-t",
        "--threshold",
        type=int,
        default=large.DEFAULT_THRESHOLD,
        help="line count from which a file is reported",
    )
    sub.add_parser("imports", parents=[common], help="find unused and broken imports")
    sub.add_parser("env", parents=[common], help="validate environment variables")
    sub.add_parser("memory", parents=[common], help="look for memory leak patterns")
    sub.add_parser("deploy", parents=[common], help="run the pre-deployment checks")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command named in ``argv`` and return its exit status."""
    args = _build_parser().parse_args(argv)
    command = args.command or "menu"

    if command == "menu":
        return menu.run()
    if command == "large":
        return large.run(
            threshold=args.threshold,
            json_output=args.json,
            quiet=args.quiet,
            root=args.directory,
        )
    if command == "imports":
        return imports_analyzer.run(
            json_output=args.json, quiet=args.quiet, project_root=args.directory
        )
    if command == "env":
        return env.run(json_output=args.json, quiet=args.quiet, directory=args.directory)
    if command == "memory":
        return memory.run(json_output=args.json, quiet=args.quiet, root=args.directory)
    return deploy.run(json_output=args.json, quiet=args.quiet, directory=args.directory)


if __name__ == "__main__":
    raise SystemExit(main())