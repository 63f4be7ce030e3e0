# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional
from datetime import datetime, timezone


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events in a single boot run

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(run_id: str) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id,
    }


# ---------------------------------------------------------------------
# Boot phases
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class PhaseStarted(BaseEvent):
    phase: str

@dataclass(frozen=True)
class PhaseCompleted(BaseEvent):
    phase: str
    duration_ms: int
    detail: Optional[str] = None

@dataclass(frozen=True)
class PhaseFailed(BaseEvent):
    phase: str
    error: str


# ---------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BootSummary(BaseEvent):
    status: str          # "OK" or "FAILED"
    last_phase: str
    error: Optional[str] = None
