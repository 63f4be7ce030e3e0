# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

#src/vrboot/logging/log.py

from __future__ import annotations

import logging
from pathlib import Path
import uuid

def init_logging(
    log_path: Path | str,
    *,
    name: str = "vrboot",
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    Initializes:
      - appending log file at DEBUG (kept across boots for post-mortem)
      - console at INFO, DEBUG when verbose
      - returns run_id so observers can reuse it
    """
    run_id = str(uuid.uuid4())

    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(log_path)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(formatter)

    logger.addHandler(fh)
    logger.addHandler(ch)

    logger.info("=== vrboot run started ===")
    logger.info(f"run_id={run_id}")
    logger.info(f"log_file={log_path}")

    return logger, run_id, log_path
