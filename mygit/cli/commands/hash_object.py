"""Plumbing commands that write objects: hash-object and write-tree."""

import click
from pathlib import Path
from mygit.core.errors import MygitError
from mygit.core.repository import Repository
from mygit.cli.context import find_repo_or_abort
from mygit.cli.output import error


@click.command('hash-object')
@click.option('-w', '--write', is_flag=True, help='Write the blob into the object database')
@click.argument('file')
def hash_object_cmd(write, file):
    """
    Compute the blob hash of FILE.

    Examples:
        mygit hash-object notes.txt
        mygit hash-object -w notes.txt
    """
    if write:
        repo = find_repo_or_abort()
    else:
        repo = Repository.find_repository() or Repository()

    try:
        click.echo(repo.hash_file(Path(file).resolve(), write=write))
    except MygitError as e:
        click.echo(error(str(e)))
        raise click.Abort()


@click.command('write-tree')
def write_tree_cmd():
    """
    Snapshot the whole working directory as tree objects.

    Prints the hash of the root tree.
    """
    repo = find_repo_or_abort()

    try:
        click.echo(repo.write_tree())
    except MygitError as e:
        click.echo(error(f"write-tree failed: {e}"))
        raise click.Abort()
