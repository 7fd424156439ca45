"""Config command - manage repository configuration."""

import click
from mygit.core.config import Config
from mygit.core.errors import MygitError
from mygit.core.repository import Repository
from mygit.cli.output import success, error, info


def split_key(key):
    """Split 'section.option' (bare options go to 'core')."""
    return key.split('.', 1) if '.' in key else ('core', key)


def load_config(is_global):
    repo = Repository.find_repository()
    if not is_global and not repo:
        click.echo(error("Not a mygit repository (use --global for global config)"))
        raise click.Abort()
    return Config(repo.config_file if repo else None)


@click.group('config')
def config_cmd():
    """Get and set repository or global options."""
    pass


@config_cmd.command('set')
@click.argument('key')
@click.argument('value')
@click.option('--global', 'is_global', is_flag=True, help='Set global config')
def config_set(key, value, is_global):
    """
    Set a config value.

    Examples:
        mygit config set user.name "Your Name"
        mygit config set core.preserve "build,mygit.exe"
        mygit config set --global user.email "you@example.com"
    """
    config = load_config(is_global)
    section, option = split_key(key)

    try:
        config.set(section, option, value, global_config=is_global)
    except MygitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    scope = "global" if is_global else "repository"
    click.echo(success(f"Set {scope} config: {key} = {value}"))


@config_cmd.command('get')
@click.argument('key')
@click.option('--global', 'is_global', is_flag=True, help='Read global config only')
def config_get(key, is_global):
    """
    Get a config value.

    Examples:
        mygit config get user.name
    """
    config = load_config(is_global) if not is_global else Config()
    section, option = split_key(key)

    try:
        value = config.get(section, option)
    except MygitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if value is None:
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()

    click.echo(value)


@config_cmd.command('list')
def config_list():
    """List all config values."""
    config = load_config(is_global=True)

    try:
        values = config.list_all()
    except MygitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    for section, options in values.items():
        for option, value in options.items():
            click.echo(f"{section}.{option}={value}")

    if not values:
        click.echo(info("No config values set"))
