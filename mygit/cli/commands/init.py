"""Initialize a new mygit repository."""

import click
from pathlib import Path
from mygit.core.errors import MygitError
from mygit.core.repository import Repository
from mygit.cli.output import success, error, info


@click.command('init')
@click.argument('path', default='.')
def init_cmd(path):
    """
    Initialize a new mygit repository.

    Creates a .mygit directory with the object database, HEAD,
    branch, index and history log.

    Examples:
        mygit init                  # Initialize in current directory
        mygit init my-project       # Initialize in my-project directory
    """
    repo_path = Path(path).resolve()

    if (repo_path / '.mygit').exists():
        click.echo(info(f"Repository already initialized at {repo_path}"))
        return

    try:
        if not repo_path.exists():
            repo_path.mkdir(parents=True)
            click.echo(info(f"Created directory {repo_path}"))

        repo = Repository(str(repo_path))
        repo.init()
    except PermissionError:
        click.echo(error(f"Permission denied: Cannot create repository at {path}"))
        raise click.Abort()
    except (MygitError, OSError) as e:
        click.echo(error(f"Failed to initialize repository: {e}"))
        raise click.Abort()

    click.echo(success(f"Initialized empty mygit repository in {repo.mygit_dir}"))
