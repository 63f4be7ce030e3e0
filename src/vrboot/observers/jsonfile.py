# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/observers/jsonfile.py
from __future__ import annotations
import json
from pathlib import Path
from .events import BaseEvent


class JsonFileObserver:
    """Appends one JSON object per event; the file accumulates across boots."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def notify(self, event: BaseEvent) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        record = {"type": event.__class__.__name__, **event.dict()}
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, sort_keys=True) + "\n")
