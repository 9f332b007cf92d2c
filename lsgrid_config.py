"""Settings file and logging setup for lsgrid."""

import json
import logging
import os
import sys
from pathlib import Path

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "lsgrid" / "config.json"
DEFAULT_CONFIG = {
    "theme": "gruvbox",
    "view": "detail",   # browser start view: "detail" or "grid"
}

LOG_FORMAT = '%(asctime)s | %(levelname)-7s | %(message)s'
LOG_DATEFMT = '%H:%M:%S'


def config_path() -> Path:
    """Location of the settings file, overridable with LSGRID_CONFIG."""
    override = os.environ.get("LSGRID_CONFIG")
    return Path(override).expanduser() if override else DEFAULT_CONFIG_PATH


def load_config() -> dict:
    """Load configuration from file, falling back to defaults."""
    config = dict(DEFAULT_CONFIG)
    path = config_path()
    try:
        if path.exists():
            data = json.loads(path.read_text())
            if isinstance(data, dict):
                config.update(data)
    except (json.JSONDecodeError, OSError):
        pass
    return config


def save_config(config: dict) -> None:
    """Save configuration to file."""
    path = config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config, indent=2))
    except OSError as e:
        logging.getLogger(__name__).warning("could not save config to %s: %s", path, e)


def setup_logging() -> None:
    """Enable debug logging when LSGRID_DEBUG or LSGRID_LOG is set.

    LSGRID_LOG names a file to append to; otherwise records go to stderr.
    """
    log_file = os.environ.get("LSGRID_LOG")
    if not (log_file or os.environ.get("LSGRID_DEBUG")):
        return

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    if log_file:
        handler = logging.FileHandler(log_file, mode='a')
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    root.addHandler(handler)
