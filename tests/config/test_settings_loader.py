from pathlib import Path
import textwrap

import pytest
from pydantic import ValidationError

from vrboot.config.loader import load_settings
from vrboot.config.models import BootSettings


def test_missing_file_gives_defaults(tmp_path: Path):
    s = load_settings(tmp_path / "nope.yaml")
    assert s == BootSettings()
    assert s.channel_path == "/dev/virtio-ports/applianceVm.vport"
    assert s.cache_path == "/home/vyos/zvr/bootstrap-info.json"
    assert s.primary_interface == "eth0"
    assert s.payload_wait.timeout_seconds == 300
    assert s.payload_wait.interval_seconds == 1
    assert s.firewall_wait.timeout_seconds == 120
    assert s.firewall_wait.interval_seconds == 0.5


def test_yaml_overrides_and_env_expansion(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("VRBOOT_TEST_AGENT", "/etc/init.d/agent")
    f = tmp_path / "vrboot.yaml"
    f.write_text(textwrap.dedent("""
        config_user: admin
        restart_command: ["${VRBOOT_TEST_AGENT}", "restart"]
        payload_wait:
          timeout_seconds: 30
          interval_seconds: 2
    """))
    s = load_settings(f)
    assert s.config_user == "admin"
    assert s.restart_command == ["/etc/init.d/agent", "restart"]
    assert s.payload_wait.timeout_seconds == 30
    assert s.channel_path == BootSettings().channel_path


def test_empty_file_gives_defaults(tmp_path: Path):
    f = tmp_path / "vrboot.yaml"
    f.write_text("")
    assert load_settings(f) == BootSettings()


def test_invalid_timing_rejected(tmp_path: Path):
    f = tmp_path / "vrboot.yaml"
    f.write_text("channel_wait:\n  timeout_seconds: 0\n  interval_seconds: 1\n")
    with pytest.raises(ValidationError):
        load_settings(f)
