"""Main CLI entry point for mygit."""

import logging

import click
from colorama import init

from mygit import __version__
from mygit.cli.output import BANNER
from mygit.cli.commands import (init_cmd, hash_object_cmd, cat_file_cmd, write_tree_cmd,
                                ls_tree_cmd, add_cmd, commit_cmd, log_cmd, checkout_cmd,
                                config_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class MygitGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        """Override to add banner before help text."""
        click.echo(BANNER)
        super().format_help(ctx, formatter)


@click.group(cls=MygitGroup)
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Show debug logging')
def cli(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )


# Register commands
cli.add_command(init_cmd)
cli.add_command(hash_object_cmd)
cli.add_command(cat_file_cmd)
cli.add_command(write_tree_cmd)
cli.add_command(ls_tree_cmd)
cli.add_command(add_cmd)
cli.add_command(commit_cmd)
cli.add_command(log_cmd)
cli.add_command(checkout_cmd)
cli.add_command(config_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
