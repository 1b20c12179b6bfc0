import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "store": "json",  # "json" | "sqlite" | "memory"
    "store_path": None,  # None = backend default (.benkyo.json / .benkyo.db)
    "daily_goal": 20,
    "kana_mode": "hiragana",  # "hiragana" | "katakana" | "both"
}

DEFAULT_STORE_PATHS: dict = {
    "json": ".benkyo.json",
    "sqlite": ".benkyo.db",
}

STORE_BACKENDS = ("json", "sqlite", "memory")
KANA_MODES = ("hiragana", "katakana", "both")


def load_config(config_path: str = ".benkyo.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .benkyo.yml in the current directory
      3. CLI argument overrides
      4. BENKYO_STORE_PATH from the environment
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    env_path = os.environ.get("BENKYO_STORE_PATH")
    if env_path:
        config["store_path"] = env_path

    if config["store"] not in STORE_BACKENDS:
        raise ValueError(f"Unknown store backend: {config['store']!r}. Choose one of {', '.join(STORE_BACKENDS)}.")
    if config["kana_mode"] not in KANA_MODES:
        raise ValueError(f"Unknown kana mode: {config['kana_mode']!r}. Choose one of {', '.join(KANA_MODES)}.")

    return config


def resolve_store_path(config: dict) -> Optional[str]:
    """Return the configured store path, or the backend's default."""
    return config.get("store_path") or DEFAULT_STORE_PATHS.get(config.get("store", "json"))
