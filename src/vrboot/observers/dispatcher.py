# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/observers/dispatcher.py
from __future__ import annotations
import logging
from typing import Iterable, List, Protocol
from .events import BaseEvent

log = logging.getLogger("vrboot")


class Observer(Protocol):
    def notify(self, event: BaseEvent) -> None: ...


class EventBus:
    """Fans boot lifecycle events out to observers.

    Observers are diagnostics only; one raising is logged and skipped so
    that a full disk or a broken sink never aborts provisioning.
    """

    def __init__(self, observers: Iterable[Observer] = ()):
        self._observers: List[Observer] = list(observers)

    def subscribe(self, observer: Observer) -> None:
        self._observers.append(observer)

    def emit(self, event: BaseEvent) -> None:
        for ob in self._observers:
            try:
                ob.notify(event)
            except Exception as exc:
                log.debug(f"observer {ob.__class__.__name__} dropped {event.__class__.__name__}: {exc}")
