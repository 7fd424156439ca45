"""CLI commands for mygit."""

from mygit.cli.commands.init import init_cmd
from mygit.cli.commands.hash_object import hash_object_cmd, write_tree_cmd
from mygit.cli.commands.ls_tree import ls_tree_cmd, cat_file_cmd
from mygit.cli.commands.add import add_cmd
from mygit.cli.commands.commit import commit_cmd
from mygit.cli.commands.log import log_cmd
from mygit.cli.commands.checkout import checkout_cmd
from mygit.cli.commands.config import config_cmd

__all__ = ['init_cmd', 'hash_object_cmd', 'write_tree_cmd', 'ls_tree_cmd', 'cat_file_cmd',
           'add_cmd', 'commit_cmd', 'log_cmd', 'checkout_cmd', 'config_cmd']
