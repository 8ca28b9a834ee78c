"""Command-line argument parsing for git-phantom."""

import argparse
from git_phantom.__version__ import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-phantom",
        description="Create, list and delete disposable git worktrees by name",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"git-phantom {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    create = subparsers.add_parser("create", help="Create a worktree on a new branch")
    create.add_argument("name", nargs="?", help="Worktree name (generated when omitted)")
    create.add_argument("--branch", help="Branch to create (default: the worktree name)")
    create.add_argument("--base", help="Commit-ish to start from (default: HEAD)")
    create.add_argument(
        "--copy-file",
        dest="copy_files",
        action="append",
        default=[],
        metavar="PATTERN",
        help="File or glob to copy into the new worktree (repeatable)",
    )

    attach = subparsers.add_parser("attach", help="Create a worktree for an existing branch")
    attach.add_argument("branch", help="Existing local branch")

    delete = subparsers.add_parser("delete", help="Delete one or more worktrees")
    delete.add_argument("names", nargs="+", help="Worktree names")
    delete.add_argument("--force", action="store_true", help="Delete even with uncommitted changes")
    delete.add_argument(
        "--keep-branch", action="store_true", help="Keep the worktree's branch"
    )

    list_parser = subparsers.add_parser("list", help="List worktrees")
    list_parser.add_argument("--names", action="store_true", help="Print worktree names only")
    list_parser.add_argument(
        "--exclude-default", action="store_true", help="Leave out the main checkout"
    )

    where = subparsers.add_parser("where", help="Print the path of a worktree")
    where.add_argument("name", help="Worktree name or branch")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
