# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/vyos/applier.py
from __future__ import annotations

import logging
import os
import shlex
import tempfile
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from vrboot.errors import ConfigCommitError
from vrboot.execution.runner import CommandRunner
from .directives import DirectiveBatch

log = logging.getLogger("vrboot")

TEMPLATES_DIR = Path(__file__).parent / "templates"
SCRIPT_TEMPLATE = "apply.vbash.j2"


class ScriptRenderer:
    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        self.env.filters["shquote"] = shlex.quote

    def render(self, batch: DirectiveBatch, *, vbash: str, run_id: str = "-") -> str:
        tmpl = self.env.get_template(SCRIPT_TEMPLATE)
        return tmpl.render(lines=batch.lines(), vbash=vbash, run_id=run_id)


class DirectiveApplier:
    """
    Commits a directive batch through the VyOS configuration engine.

    The whole batch goes into one script and one commit; a rejected
    directive aborts the script before ``commit`` so nothing is applied.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        *,
        config_user: str = "vyos",
        vbash: str = "/bin/vbash",
        renderer: Optional[ScriptRenderer] = None,
    ):
        self.runner = runner or CommandRunner(label="vyos-commit")
        self.config_user = config_user
        self.vbash = vbash
        self.renderer = renderer or ScriptRenderer()

    def apply(self, batch: DirectiveBatch, *, run_id: str = "-") -> None:
        if not len(batch):
            log.info("no directives to apply")
            return

        script = self.renderer.render(batch, vbash=self.vbash, run_id=run_id)
        log.debug(f"vyos script:\n{script}")

        fd, path = tempfile.mkstemp(prefix="vrboot-", suffix=".vbash")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(script)
            # the config user has to read a file created by root
            os.chmod(path, 0o644)
            self.runner.run(
                [self.vbash, path],
                as_user=self.config_user,
                check=True,
                error_cls=ConfigCommitError,
            )
        finally:
            os.unlink(path)

        log.info(f"applied {len(batch)} directives as user {self.config_user}")
