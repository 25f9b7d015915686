# debgraph/modules/config.py
import configparser
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from debgraph import DebGraphError

DEFAULT_LOCATIONS = [
    "/etc/debgraph/debgraph.conf",
    os.path.expanduser("~/.config/debgraph/debgraph.conf"),
]

DEFAULT_COLORS = {
    "installed": "green",
    "not_installed": "orange",
    "invalid": "red",
}


class ConfigError(DebGraphError):
    pass


class DebGraphConfig:
    """
    Reads debgraph.conf from the first location that exists.

    An explicit path that does not exist (or does not parse) is an error;
    when none of the default locations exist the built-in defaults apply.
    """

    def __init__(self, locations=None, path=None):
        self.explicit = path
        self.locations = [path] if path else (locations or DEFAULT_LOCATIONS)
        self.config = configparser.ConfigParser()
        self.loaded_from = None
        self.reload()

    def reload(self):
        """(Re)load the configuration from the first available file."""
        self.config = configparser.ConfigParser()
        self.loaded_from = None
        for path in self.locations:
            if os.path.isfile(path):
                try:
                    self.config.read(path, encoding="utf-8")
                except configparser.Error as e:
                    raise ConfigError(f"Malformed configuration file {path}: {e}") from e
                self.loaded_from = path
                return
        if self.explicit:
            raise ConfigError(f"Configuration file not found: {self.explicit}")

    def get(self, section, option, fallback=None):
        try:
            return self.config.get(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def getboolean(self, section, option, fallback=False):
        try:
            return self.config.getboolean(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getint(self, section, option, fallback=0):
        try:
            return self.config.getint(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getfloat(self, section, option, fallback=None):
        try:
            return self.config.getfloat(section, option, fallback=fallback)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getlist(self, section, option, fallback=None, delimiter=","):
        raw = self.get(section, option, fallback="")
        if raw:
            return [item.strip() for item in raw.split(delimiter) if item.strip()]
        return fallback or []

    def __getitem__(self, section):
        if section in self.config:
            return dict(self.config[section])
        raise KeyError(f"Section '{section}' not found.")

    def __contains__(self, section):
        return section in self.config


@dataclass
class GraphOptions:
    """Everything one run needs, passed explicitly to the CLI pipeline."""

    packages: List[str] = field(default_factory=list)
    output_format: str = "dot"
    output_path: Optional[str] = None
    query_command: str = "dpkg-query"
    query_timeout: Optional[float] = None
    colors: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))
    strict: bool = True
    progress: bool = True

    @classmethod
    def from_config(cls, config: DebGraphConfig, **overrides) -> "GraphOptions":
        colors = dict(DEFAULT_COLORS)
        for key in DEFAULT_COLORS:
            colors[key] = config.get("colors", key, fallback=colors[key])
        timeout = config.getfloat("query", "timeout", fallback=None)
        options = cls(
            output_format=config.get("output", "format", fallback="dot"),
            query_command=config.get("query", "command", fallback="dpkg-query"),
            query_timeout=timeout if timeout and timeout > 0 else None,
            colors=colors,
            strict=config.getboolean("discovery", "strict", fallback=True),
        )
        # None means "not given on the command line"
        for key, value in overrides.items():
            if value is not None:
                setattr(options, key, value)
        return options
