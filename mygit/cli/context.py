"""Helpers shared by CLI commands."""

import click

from mygit.core.errors import ObjectNotFound
from mygit.core.repository import Repository
from mygit.cli.output import error


def find_repo_or_abort() -> Repository:
    """Locate the enclosing repository or stop the command."""
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a mygit repository (run 'mygit init' first)"))
        raise click.Abort()
    return repo


def resolve_hash_or_abort(repo: Repository, obj_hash: str) -> str:
    """Expand an abbreviated hash or stop the command."""
    try:
        return repo.expand_hash(obj_hash)
    except ObjectNotFound as e:
        click.echo(error(str(e)))
        raise click.Abort()
