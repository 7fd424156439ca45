"""Log command - show commit history."""

import click
from datetime import datetime
from colorama import Fore, Style
from mygit.core.errors import MygitError
from mygit.operations.inspect import log
from mygit.cli.context import find_repo_or_abort
from mygit.cli.output import error, info


def format_timestamp(timestamp):
    """Format Unix timestamp to readable date."""
    return datetime.fromtimestamp(int(timestamp)).strftime("%a %b %d %H:%M:%S %Y")


@click.command('log')
def log_cmd():
    """
    Show commit history, newest first.
    """
    repo = find_repo_or_abort()

    try:
        records = log(repo)
    except MygitError as e:
        click.echo(error(f"Cannot read history: {e}"))
        raise click.Abort()

    if not records:
        click.echo(info("No commits yet"))
        return

    for record in records:
        click.echo(f"{Fore.YELLOW}commit {record.commit}{Style.RESET_ALL}")
        if record.parent:
            click.echo(f"parent {record.parent}")
        click.echo(f"Date:   {format_timestamp(record.timestamp)}")
        click.echo()
        for line in record.message.split('\n'):
            click.echo(f"    {line}")
        click.echo()
