# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/config/loader.py

import logging
import os
import yaml
from pathlib import Path
from .models import BootSettings

log = logging.getLogger("vrboot")

DEFAULT_SETTINGS_PATH = Path("/etc/vrboot/vrboot.yaml")


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    return yaml.safe_load(expanded) or {}


def load_settings(path: str | Path = DEFAULT_SETTINGS_PATH) -> BootSettings:
    """
    Load boot settings, overlaying an optional YAML file on the defaults.

    The image normally ships without the file; it only exists on images whose
    paths or service names differ from the stock appliance.
    """
    path = Path(path)
    if not path.is_file():
        log.debug("No settings file at %s — using defaults", path)
        return BootSettings()

    log.debug("Loading settings from %s", path)
    return BootSettings.model_validate(_load_yaml(path))
