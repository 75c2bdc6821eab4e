import os
import json
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.getcwd(), "data")
CONFIG_FILE = os.path.join(DATA_DIR, "config.json")

DEFAULT_CONFIG: Dict[str, Any] = {
    "server_url": "http://localhost:8080",
    "request_timeout": None,  # seconds; None waits until the transport gives up
    "ui_port": 8081,
    "log_level": "INFO",
    "title": "RecycleMe",
}

# Environment variable -> (config key, converter)
ENV_OVERRIDES = {
    "RECYCLEME_SERVER_URL": ("server_url", str),
    "RECYCLEME_PORT": ("ui_port", int),
    "RECYCLEME_LOG_LEVEL": ("log_level", str),
}


def load_config(path: str = None) -> Dict[str, Any]:
    """
    Returns the defaults, overlaid with the JSON config file (if any),
    overlaid with RECYCLEME_* environment variables.
    """
    path = path or CONFIG_FILE
    config = dict(DEFAULT_CONFIG)

    if os.path.exists(path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                config.update(json.load(f))
        except (OSError, ValueError) as e:
            logger.error(f"Error reading config {path}: {e}")

    for env_name, (key, convert) in ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw:
            try:
                config[key] = convert(raw)
            except ValueError:
                logger.warning(f"Ignoring invalid {env_name}={raw!r}")

    config["server_url"] = str(config["server_url"]).rstrip("/")
    return config


def save_config(config: Dict[str, Any], path: str = None):
    path = path or CONFIG_FILE
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)