# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/utils/readiness.py
from __future__ import annotations

import logging
import time
from typing import Callable

from vrboot.errors import CommandError, NotReadyError, ReadinessTimeout

log = logging.getLogger("vrboot")

# Raised by probes while a precondition is still settling. Anything else
# (a malformed payload, a programming error) escapes the loop immediately.
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (NotReadyError, CommandError, OSError)


def wait_until(
    predicate: Callable[[], bool],
    *,
    timeout: float,
    interval: float,
    description: str,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Poll ``predicate`` every ``interval`` seconds until it returns True.

    Returns the number of polls it took. Raises ReadinessTimeout once
    ``timeout`` seconds have elapsed without success.
    """
    deadline = clock() + timeout
    attempt = 0
    while True:
        attempt += 1
        try:
            ok = bool(predicate())
        except TRANSIENT_ERRORS as exc:
            log.debug(f"{description} not ready (poll {attempt}): {exc}")
            ok = False

        if ok:
            log.debug(f"{description} ready after {attempt} poll(s)")
            return attempt

        remaining = deadline - clock()
        if remaining <= 0:
            raise ReadinessTimeout(description, timeout)
        sleep(min(interval, remaining))
