# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/cli/app.py
from __future__ import annotations

import typer

from vrboot.boot.orchestrator import BootOrchestrator
from vrboot.config.loader import load_settings
from vrboot.errors import BootError
from vrboot.logging.log import init_logging
from vrboot.observers.dispatcher import EventBus
from vrboot.observers.jsonfile import JsonFileObserver
from vrboot.observers.logger import LoggerObserver


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(
    help="First-boot provisioning for the virtual router appliance",
    add_completion=False,
)


@app.command()
def main() -> None:
    """
    Wait for the hypervisor's bootstrap info, configure interfaces, ssh and
    firewall from it, then restart the control-plane agent.
    """
    settings = load_settings()
    logger, run_id, _ = init_logging(settings.log_path)

    bus = EventBus(
        observers=[
            LoggerObserver(logger),
            JsonFileObserver(settings.events_path),
        ]
    )

    try:
        BootOrchestrator(settings, run_id=run_id, bus=bus).run()
    except BootError as exc:
        logger.error(f"boot aborted: {exc}")
        typer.echo(f"vrboot: {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        logger.exception("boot aborted by an unexpected error")
        typer.echo(f"vrboot: unexpected error: {exc}", err=True)
        raise typer.Exit(code=1)

    logger.info("=== vrboot run finished ===")


if __name__ == "__main__":
    app()
