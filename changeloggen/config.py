#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

LOG_FORMAT = "%(levelname)s: %(message)s"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("changeloggen")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']
DEFAULT_CREDIT_URL = "https://github.com/fergusonr/ChangeLogGenerator"


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. CHANGELOGGEN_CONFIG environment variable
    2. ~/.changeloggen/ directory
    """
    if 'CHANGELOGGEN_CONFIG' in os.environ:
        path = Path(os.environ['CHANGELOGGEN_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.changeloggen'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path
    return config_dir / 'config.json'


def load_config():
    """Load configuration from file, falling back to defaults."""
    config_path = get_config_path()

    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    return apply_env_overrides(config)


def get_default_config():
    """Get default configuration."""
    return {
        "output": {
            "credit_url": DEFAULT_CREDIT_URL,
            "date_format": "",  # strftime pattern; empty = pinned English long date
        },
        "colors": {
            "foreground": [255, 255, 255],
            "tagged": [0, 100, 0],
            "untagged": [255, 165, 0],
        },
        "logging": {
            "level": "INFO",
            "format": LOG_FORMAT,
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: CHANGELOGGEN_SECTION_KEY
    For example: CHANGELOGGEN_OUTPUT_DATE_FORMAT="%Y-%m-%d"
    """
    env_prefix = "CHANGELOGGEN_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'CHANGELOGGEN_CONFIG':
            continue

        section, _, key = env_key[len(env_prefix):].lower().partition('_')
        if section not in config or not isinstance(config[section], dict):
            continue
        if key not in config[section]:
            continue

        current = config[section][key]
        if isinstance(current, list):
            # RGB triples: "0,100,0"
            try:
                config[section][key] = [int(part) for part in value.split(',')]
            except ValueError:
                logger.warning(f"Ignoring {env_key}: expected comma-separated integers")
        else:
            config[section][key] = value

    return config


def configure_logging(config=None, debug=False):
    """Apply the logging section of the config to the package logger."""
    settings = (config or get_default_config()).get("logging", {})
    level = logging.DEBUG if debug else getattr(logging, str(settings.get("level", "INFO")).upper(), logging.INFO)
    logger.setLevel(level)
    fmt = settings.get("format") or LOG_FORMAT
    for handler in logging.getLogger().handlers:
        handler.setFormatter(logging.Formatter(fmt))
