"""Loads the optional TOML config file and sets up logging.

Recognised options, with their defaults:

```
[logging]
level = "WARNING"
format = "%(levelname)s:%(name)s:%(message)s"
datefmt = "%H:%M:%S"
destination = ""        # log file, empty for stderr

[behaviour]
print_tokens = false    # dump scanned tokens before running
print_tree = false      # dump parsed statements before running
color = true            # colour diagnostics
```

Missing or mistyped options fall back to the defaults.
"""

import logging
import os
import tomllib
from copy import deepcopy


logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "lox.toml"

DEFAULTS = {
    "logging": {
        "level": "WARNING",
        "format": "%(levelname)s:%(name)s:%(message)s",
        "datefmt": "%H:%M:%S",
        "destination": "",
    },
    "behaviour": {
        "print_tokens": False,
        "print_tree": False,
        "color": True,
    },
}


class ConfigError(Exception):
    """Config file could not be read or parsed."""


class Config:
    """Dotted-path access ("category.option") to the merged defaults and config file."""

    def __init__(self, filename=None):
        self.data = deepcopy(DEFAULTS)
        self.filename = filename

        if filename is None and os.path.exists(DEFAULT_FILENAME):
            self.filename = DEFAULT_FILENAME

        if self.filename is not None:
            self.load(self.filename)

    def load(self, filename):
        """Merges filename into the current options."""
        try:
            with open(filename, "rb") as file:
                data = tomllib.load(file)
        except OSError as error:
            raise ConfigError(f"could not open config file '{filename}': {error.strerror}")
        except tomllib.TOMLDecodeError as error:
            raise ConfigError(f"could not parse config file '{filename}': {error}")

        for category, options in data.items():
            if category not in DEFAULTS or not isinstance(options, dict):
                logger.warning("ignoring unknown config category %r", category)
                continue

            for option, value in options.items():
                default = DEFAULTS[category].get(option)
                if default is None or type(value) is not type(default):
                    logger.warning("ignoring invalid config option %r", f"{category}.{option}")
                    continue
                self.data[category][option] = value

        logger.info("read config from %r", filename)

    def get(self, path):
        """Returns the value at path, or None if path does not exist."""
        value = self.data
        for key in path.split("."):
            if not isinstance(value, dict):
                return None
            value = value.get(key)
        return value

    def getstr(self, path):
        result = self.get(path)
        return result if isinstance(result, str) else None

    def getbool(self, path):
        result = self.get(path)
        return result if isinstance(result, bool) else None

    def set(self, path, value):
        """Overrides an option, e.g. from a command-line flag."""
        category, option = path.split(".")
        self.data[category][option] = value

    def setup_logging(self):
        """Configures the root logger from the [logging] options."""
        level = logging.getLevelName(self.getstr("logging.level").upper())
        if not isinstance(level, int):
            level = logging.WARNING

        formatter = logging.Formatter(self.getstr("logging.format"), datefmt=self.getstr("logging.datefmt"))
        destination = self.getstr("logging.destination")
        handler = logging.FileHandler(destination, mode="a") if destination else logging.StreamHandler()
        handler.setFormatter(formatter)

        root = logging.getLogger()
        root.setLevel(level)
        root.addHandler(handler)
        return root
