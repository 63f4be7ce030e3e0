# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/observers/logger.py
from __future__ import annotations
import logging
from .events import BaseEvent, BootSummary, PhaseCompleted, PhaseFailed, PhaseStarted


class LoggerObserver:
    """Mirrors phase transitions into the run log."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def notify(self, event: BaseEvent) -> None:
        if isinstance(event, PhaseStarted):
            self.logger.info(f"[{event.phase}] started")
        elif isinstance(event, PhaseCompleted):
            suffix = f": {event.detail}" if event.detail else ""
            self.logger.info(f"[{event.phase}] done in {event.duration_ms}ms{suffix}")
        elif isinstance(event, PhaseFailed):
            self.logger.error(f"[{event.phase}] failed: {event.error}")
        elif isinstance(event, BootSummary):
            level = logging.INFO if event.status == "OK" else logging.ERROR
            self.logger.log(level, f"boot {event.status} (last phase {event.last_phase})")
        else:
            self.logger.debug(f"[EVENT] {event.__class__.__name__}: {event.dict()}")
