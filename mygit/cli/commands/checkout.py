"""Checkout command - restore the working directory to a commit."""

import click
from mygit.core.errors import InvalidCommit, MygitError
from mygit.operations.checkout import CheckoutEngine
from mygit.cli.context import find_repo_or_abort
from mygit.cli.output import success, error, info, warning


@click.command('checkout')
@click.option('--keep', 'keep', multiple=True,
              help='Top-level name to leave in place (repeatable)')
@click.argument('commit_hash')
def checkout_cmd(keep, commit_hash):
    """
    Replace the working directory with the snapshot of a commit.

    Everything at the top of the working directory is deleted, except
    .mygit, names given with --keep and names listed in the
    'core.preserve' config value; then the commit's files are written
    out and the branch is moved to the commit.

    Examples:
        mygit checkout 3f2a9c1d
        mygit checkout --keep build 3f2a9c1d
    """
    repo = find_repo_or_abort()

    try:
        full_hash = repo.expand_hash(commit_hash)
    except MygitError:
        full_hash = commit_hash

    try:
        result = CheckoutEngine(repo, preserve=keep).checkout(full_hash)
    except InvalidCommit as e:
        click.echo(error(str(e)))
        click.echo(info("Working directory left unchanged"))
        raise click.Abort()
    except MygitError as e:
        click.echo(error(f"Checkout failed: {e}"))
        raise click.Abort()

    for message in result.warnings:
        click.echo(warning(f"Warning: {message}"))

    click.echo(success(f"Checked out commit {result.commit}"))
    click.echo(info(f"Restored {len(result.restored)} file(s)"))
