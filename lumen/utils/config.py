"""
Settings resolution for LUMEN.

Built-in defaults are merged with an optional YAML file whose path comes from
the LUMEN_CONFIG_PATH environment variable (or an explicit argument). Later
sources override earlier ones, key by key.

Example YAML:

    backup:
      exported_by: "Acme Resume Studio"
    export:
      indent: 4
"""

import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

from lumen import __version__

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

DEFAULT_SETTINGS: Dict[str, Any] = {
    "backup": {
        "exported_by": "LUMEN Resume Toolkit",
        "app_version": __version__,
        "extended_schema_url": "https://lumen-resume.dev/schemas/extended-resume-v1.json",
    },
    "export": {
        "json_resume_schema_url": (
            "https://raw.githubusercontent.com/jsonresume/resume-schema/v1.0.0/schema.json"
        ),
        "indent": 2,
    },
}


def load_settings(config_path: Path = None) -> DictConfig:
    """
    Load LUMEN settings, overlaying an optional YAML file on the built-in defaults.

    Args:
        config_path: Optional path to a YAML settings file. Defaults to the
                     LUMEN_CONFIG_PATH environment variable when set.

    Returns:
        Merged OmegaConf DictConfig

    Raises:
        FileNotFoundError: If an explicitly configured file does not exist
    """
    settings = OmegaConf.create(DEFAULT_SETTINGS)

    if config_path is None and os.getenv("LUMEN_CONFIG_PATH"):
        config_path = Path(os.getenv("LUMEN_CONFIG_PATH"))

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Settings file not found: {config_path}")
        settings = OmegaConf.merge(settings, OmegaConf.load(config_path))

    return settings


def settings_to_dict(settings: DictConfig) -> Dict[str, Any]:
    """Resolve a settings object into plain containers."""
    return OmegaConf.to_container(settings, resolve=True)
