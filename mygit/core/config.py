"""Layered INI configuration: environment, repository, then global file."""

import os
import configparser
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import ConfigError, StorageIO

ENV_PREFIX = 'MYGIT'


def _load(path: Optional[Path]) -> configparser.ConfigParser:
    # Raw values: '%' is ordinary text in names, emails and paths
    parser = configparser.ConfigParser(interpolation=None)
    if path is not None and path.exists():
        try:
            parser.read(path, encoding='utf-8')
        except configparser.Error as e:
            raise ConfigError(f"Malformed config file {path}: {e}") from e
    return parser


class Config:
    """
    Reads and writes mygit settings.

    A lookup checks MYGIT_<SECTION>_<KEY> in the environment, then the
    repository file (.mygit/config), then the global ~/.mygitconfig.
    Writes go to exactly one of the two files.
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.mygitconfig'

    def __init__(self, repo_config_path: Optional[Path] = None):
        self.repo_config_path = Path(repo_config_path) if repo_config_path else None
        self._parsers: Dict[str, configparser.ConfigParser] = {}

    def _parser(self, scope: str) -> configparser.ConfigParser:
        if scope not in self._parsers:
            path = self.GLOBAL_CONFIG_PATH if scope == 'global' else self.repo_config_path
            self._parsers[scope] = _load(path)
        return self._parsers[scope]

    def _scopes(self) -> List[str]:
        """Scopes in lookup order, highest priority first."""
        return ['repo', 'global'] if self.repo_config_path else ['global']

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Look up section.key.

        Raises:
            ConfigError: If one of the files is malformed
        """
        env_value = os.environ.get(f"{ENV_PREFIX}_{section.upper()}_{key.upper()}")
        if env_value is not None:
            return env_value

        for scope in self._scopes():
            parser = self._parser(scope)
            if parser.has_option(section, key):
                return parser.get(section, key)

        return fallback

    def get_list(self, section: str, key: str) -> List[str]:
        """Split a comma or whitespace separated value."""
        return (self.get(section, key) or '').replace(',', ' ').split()

    def set(self, section: str, key: str, value: str, global_config: bool = False) -> None:
        """
        Store section.key in the repository file, or the global one.

        Raises:
            ConfigError: Outside a repository without global_config, or
                if the name or value cannot be stored
            StorageIO: If the file cannot be written
        """
        if global_config:
            scope, path = 'global', self.GLOBAL_CONFIG_PATH
        elif self.repo_config_path:
            scope, path = 'repo', self.repo_config_path
        else:
            raise ConfigError("No repository config available (use the global config)")

        parser = self._parser(scope)
        try:
            if not parser.has_section(section):
                parser.add_section(section)
            parser.set(section, key, value)
        except (configparser.Error, ValueError) as e:
            raise ConfigError(f"Cannot set {section}.{key}: {e}") from e

        try:
            with open(path, 'w', encoding='utf-8') as f:
                parser.write(f)
        except OSError as e:
            raise StorageIO(f"Cannot write config {path}: {e}") from e

    def list_all(self) -> Dict[str, Dict[str, str]]:
        """All values as {section: {key: value}}, repository entries winning."""
        merged: Dict[str, Dict[str, str]] = {}
        for scope in reversed(self._scopes()):
            parser = self._parser(scope)
            for section in parser.sections():
                merged.setdefault(section, {}).update(parser.items(section))
        return merged

    def get_user_identity(self) -> Tuple[Optional[str], Optional[str]]:
        """(user.name, user.email); either may be None."""
        return self.get('user', 'name'), self.get('user', 'email')
