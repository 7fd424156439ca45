"""Add command - stage files for commit."""

import os
import click
from mygit.core.errors import MygitError, PathNotFound
from mygit.cli.context import find_repo_or_abort
from mygit.cli.output import success, error, info


@click.command('add')
@click.argument('paths', nargs=-1, required=True)
def add_cmd(paths):
    """
    Add file contents to the staging area.

    Directories are added recursively. Modified files must be added
    again to stage the new content.

    Examples:
        mygit add file.txt
        mygit add src
        mygit add .
    """
    repo = find_repo_or_abort()

    try:
        index = repo.load_index()
    except MygitError as e:
        click.echo(error(f"Cannot read index: {e}"))
        raise click.Abort()

    added_files = []
    failed_files = []

    for path_arg in paths:
        try:
            result = index.add_path(repo, os.path.abspath(path_arg))
        except PathNotFound:
            failed_files.append((path_arg, "File not found"))
            continue

        added_files.extend(result.added)
        failed_files.extend(result.failed)

    if added_files:
        click.echo(success(f"Added {len(added_files)} file(s) to staging area"))
        for file in added_files:
            click.echo(info(f"  {file}"))

    if failed_files:
        click.echo()
        click.echo(error(f"Failed to add {len(failed_files)} file(s):"))
        for file, reason in failed_files:
            click.echo(error(f"  {file}: {reason}"))

    if not added_files and not failed_files:
        click.echo(error("No files matched"))

    if failed_files and not added_files:
        raise click.Abort()
