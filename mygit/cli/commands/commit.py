"""Commit command - create a commit from staged changes."""

import click
from mygit.core.errors import MygitError
from mygit.operations.commit import create_commit
from mygit.cli.context import find_repo_or_abort
from mygit.cli.output import success, error, info


@click.command('commit')
@click.option('-m', '--message', default='Initial commit', show_default=True,
              help='Commit message')
@click.option('--author', help='Author name and email (format: "Name <email>")')
def commit_cmd(message, author):
    """
    Record the staged files as a new commit.

    The staging area is cleared after a successful commit.

    Examples:
        mygit commit -m "Add notes"
        mygit commit -m "Fix typo" --author "Jane <jane@example.com>"
    """
    repo = find_repo_or_abort()

    try:
        commit_hash = create_commit(repo, message, author=author)
    except MygitError as e:
        click.echo(error(f"Failed to create commit: {e}"))
        raise click.Abort()

    if commit_hash is None:
        click.echo(info("Nothing to commit"))
        click.echo(info("Use 'mygit add <file>' to stage changes"))
        return

    click.echo(success(f"Created commit {commit_hash}"))
