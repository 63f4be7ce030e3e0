# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/bootstrap/channel.py

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Tuple

from vrboot.config.models import ReadinessSpec
from vrboot.errors import NotReadyError
from vrboot.utils.readiness import wait_until
from .models import BootstrapDocument, parse_bootstrap_document

log = logging.getLogger("vrboot")

# The control-plane agent reads the cache as a different user.
CACHE_MODE = 0o777


@dataclass
class ChannelReader:
    """
    Reads the bootstrap document the hypervisor writes to the virtio port.

    An absent device or an empty read means the hypervisor has not delivered
    yet and is polled; content that is not a valid document fails at once.
    """

    channel_path: Path
    cache_path: Path
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], None] = time.sleep

    def __post_init__(self):
        self.channel_path = Path(self.channel_path)
        self.cache_path = Path(self.cache_path)

    def device_present(self) -> bool:
        if not self.channel_path.exists():
            log.debug(f"{self.channel_path} doesn't exist, wait it ...")
            return False
        return True

    def wait_for_device(self, spec: ReadinessSpec) -> None:
        wait_until(
            self.device_present,
            timeout=spec.timeout_seconds,
            interval=spec.interval_seconds,
            description=f"virtio channel {self.channel_path}",
            clock=self.clock,
            sleep=self.sleep,
        )

    def read(self, spec: ReadinessSpec) -> BootstrapDocument:
        """Block until a document arrives, cache it, and return it."""
        found: List[Tuple[bytes, BootstrapDocument]] = []

        def _poll() -> bool:
            content = self.channel_path.read_bytes()
            if not content.strip():
                raise NotReadyError(f"no content in {self.channel_path}, it may not be ready")
            # malformed content raises MalformedBootstrapError and ends the wait
            found.append((content, parse_bootstrap_document(content)))
            return True

        wait_until(
            _poll,
            timeout=spec.timeout_seconds,
            interval=spec.interval_seconds,
            description=f"bootstrap info on {self.channel_path}",
            clock=self.clock,
            sleep=self.sleep,
        )

        content, document = found[0]
        self._write_cache(content)
        log.debug(f"received bootstrap info:\n{content.decode('utf-8', 'replace')}")
        return document

    def _write_cache(self, content: bytes) -> None:
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        self.cache_path.write_bytes(content)
        os.chmod(self.cache_path, CACHE_MODE)
        log.info(f"bootstrap info cached at {self.cache_path}")
