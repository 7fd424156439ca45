"""Inspect stored objects: ls-tree and cat-file."""

import click
from mygit.core.errors import MygitError
from mygit.operations.inspect import cat_file, list_tree
from mygit.cli.context import find_repo_or_abort, resolve_hash_or_abort
from mygit.cli.output import error


@click.command('ls-tree')
@click.option('--name-only', is_flag=True, help='Show only file names')
@click.argument('tree_hash')
def ls_tree_cmd(name_only, tree_hash):
    """
    List the contents of a tree object.

    TREE_HASH may also name a commit, in which case its root tree is listed.

    Examples:
        mygit ls-tree 3f2a9c1
        mygit ls-tree --name-only 3f2a9c1
    """
    repo = find_repo_or_abort()
    full_hash = resolve_hash_or_abort(repo, tree_hash)

    try:
        for row in list_tree(repo, full_hash, name_only=name_only):
            click.echo(row)
    except MygitError as e:
        click.echo(error(f"ls-tree failed: {e}"))
        raise click.Abort()


@click.command('cat-file')
@click.option('-p', 'mode', flag_value='content', help='Print object content')
@click.option('-s', 'mode', flag_value='size', help='Print object size')
@click.option('-t', 'mode', flag_value='type', help='Print object type')
@click.argument('object_hash')
def cat_file_cmd(mode, object_hash):
    """
    Show object content, type, or size.

    Examples:
        mygit cat-file -t abc123     # Show object type
        mygit cat-file -s abc123     # Show object size
        mygit cat-file -p abc123     # Print object content
    """
    if mode is None:
        click.echo(error("One of -p, -s or -t is required"))
        raise click.Abort()

    repo = find_repo_or_abort()
    full_hash = resolve_hash_or_abort(repo, object_hash)

    try:
        output = cat_file(repo, full_hash, mode)
    except MygitError as e:
        click.echo(error(f"cat-file failed: {e}"))
        raise click.Abort()

    click.echo(output, nl=(mode != 'content'))
