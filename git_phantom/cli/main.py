"""Command-line interface for git-phantom"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_phantom.context import Context, create_context
from git_phantom.core import WorktreeManager
from git_phantom.exceptions import ExitCode, GitPhantomError, exit_code_for
from git_phantom.logging_config import get_logger, setup_logging
from git_phantom.models.worktree import CreateOptions, DeleteOptions
from git_phantom.services.git import GitOperations
from .args import parse_args

console = Console()
error_console = Console(stderr=True)
logger = get_logger(__name__)


def _fail(error: GitPhantomError) -> int:
    error_console.print(f"[red]Error:[/red] {escape(error.message)}")
    return exit_code_for(error)


def _print_created(success) -> None:
    console.print(f"[green]{escape(success.message)}[/green]")
    if success.copied_files:
        console.print(f"Copied {len(success.copied_files)} file(s): {escape(', '.join(success.copied_files))}")
    if success.skipped_files:
        console.print(f"[dim]Skipped (not found): {escape(', '.join(success.skipped_files))}[/dim]")


def handle_create(manager: WorktreeManager, context: Context, args) -> int:
    name = args.name
    if not name:
        generated = manager.generate_unique_name()
        if generated.is_err:
            return _fail(generated.error)
        name = generated.value
        logger.debug(f"Generated worktree name '{name}'")

    config = context.config
    options = CreateOptions(branch=args.branch, base=args.base, copy_files=args.copy_files or None)
    result = manager.create_worktree(
        name,
        options,
        post_create_copy_files=config.post_create_copy_files if config else None,
        post_create_commands=config.post_create_commands if config else None,
    )
    if result.is_err:
        return _fail(result.error)

    _print_created(result.value)
    return ExitCode.SUCCESS


def handle_attach(manager: WorktreeManager, context: Context, args) -> int:
    config = context.config
    result = manager.attach_worktree(
        args.branch,
        post_create_copy_files=config.post_create_copy_files if config else None,
        post_create_commands=config.post_create_commands if config else None,
    )
    if result.is_err:
        return _fail(result.error)

    _print_created(result.value)
    return ExitCode.SUCCESS


def handle_delete(manager: WorktreeManager, context: Context, args) -> int:
    options = DeleteOptions(force=args.force, delete_branch=not args.keep_branch)
    pre_delete = context.config.pre_delete_commands if context.config else None

    for result in manager.delete_worktrees(args.names, options, pre_delete_commands=pre_delete):
        if result.is_err:
            return _fail(result.error)
        message = result.value.message
        style = "yellow" if result.value.has_uncommitted_changes else "green"
        console.print(f"[{style}]{escape(message)}[/{style}]")
    return ExitCode.SUCCESS


def handle_list(manager: WorktreeManager, context: Context, args) -> int:
    result = manager.list_worktrees(exclude_default=args.exclude_default)
    if result.is_err:
        return _fail(result.error)

    listing = result.value
    if not listing.worktrees:
        if not args.names:
            console.print(listing.message or "No worktrees found")
        return ExitCode.SUCCESS

    if args.names:
        for worktree in listing.worktrees:
            console.print(worktree.name, highlight=False, markup=False, soft_wrap=True)
        return ExitCode.SUCCESS

    table = Table()
    table.add_column("Name")
    table.add_column("Branch")
    table.add_column("Status")
    table.add_column("Path")
    for worktree in listing.worktrees:
        status = "[green]clean[/green]" if worktree.is_clean else "[yellow]dirty[/yellow]"
        table.add_row(escape(worktree.name), escape(worktree.branch), status, escape(worktree.path))
    console.print(table)
    return ExitCode.SUCCESS


def handle_where(manager: WorktreeManager, context: Context, args) -> int:
    result = manager.resolve_worktree_name_or_branch(args.name)
    if result.is_err:
        return _fail(result.error)
    console.print(result.value.path, highlight=False, markup=False, soft_wrap=True)
    return ExitCode.SUCCESS


HANDLERS = {
    "create": handle_create,
    "attach": handle_attach,
    "delete": handle_delete,
    "list": handle_list,
    "where": handle_where,
}


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)

    # Setup logging before touching the repository
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        git_root = GitOperations.get_git_root()
        context = create_context(git_root)
        manager = WorktreeManager(context.git_root, context.worktrees_directory)
        return HANDLERS[parsed_args.command](manager, context, parsed_args)
    except GitPhantomError as e:
        return _fail(e)
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return ExitCode.GENERAL_ERROR
    except Exception as e:
        error_console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args.debug:
            error_console.print_exception()
        return ExitCode.GENERAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
