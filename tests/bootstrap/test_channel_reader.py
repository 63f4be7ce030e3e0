import json
import stat
from pathlib import Path

import pytest

from vrboot.bootstrap.channel import ChannelReader
from vrboot.config.models import ReadinessSpec
from vrboot.errors import MalformedBootstrapError, ReadinessTimeout

PAYLOAD = json.dumps({
    "publicKey": "ssh-rsa AAAAB3Nza user@host",
    "managementNic": {"mac": "52:54:00:11:11:11", "ip": "192.168.1.10", "netmask": "255.255.255.0"},
    "sshPort": 22,
}).encode()


class FakeClock:
    def __init__(self, on_sleep=None):
        self.now = 0.0
        self.sleeps = []
        self.on_sleep = on_sleep

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds
        if self.on_sleep:
            self.on_sleep(len(self.sleeps))


def _reader(tmp_path: Path, clock: FakeClock) -> ChannelReader:
    return ChannelReader(
        tmp_path / "dev" / "applianceVm.vport",
        tmp_path / "zvr" / "bootstrap-info.json",
        clock=clock,
        sleep=clock.sleep,
    )


def test_wait_for_device_times_out_when_absent(tmp_path: Path):
    clock = FakeClock()
    reader = _reader(tmp_path, clock)
    with pytest.raises(ReadinessTimeout):
        reader.wait_for_device(ReadinessSpec(timeout_seconds=120, interval_seconds=0.5))
    assert clock.now == 120


def test_wait_for_device_returns_once_present(tmp_path: Path):
    device = tmp_path / "dev" / "applianceVm.vport"

    def appear(n):
        if n == 4:
            device.parent.mkdir(parents=True)
            device.write_bytes(b"")

    clock = FakeClock(on_sleep=appear)
    _reader(tmp_path, clock).wait_for_device(ReadinessSpec(timeout_seconds=120, interval_seconds=0.5))
    assert clock.now == 2.0


def test_read_polls_until_content_then_caches_it(tmp_path: Path):
    device = tmp_path / "dev" / "applianceVm.vport"
    device.parent.mkdir(parents=True)
    device.write_bytes(b"")

    def deliver(n):
        if n == 3:
            device.write_bytes(PAYLOAD)

    clock = FakeClock(on_sleep=deliver)
    reader = _reader(tmp_path, clock)
    doc = reader.read(ReadinessSpec(timeout_seconds=300, interval_seconds=1))

    assert doc.ssh_port == 22
    assert clock.sleeps == [1, 1, 1]
    cache = tmp_path / "zvr" / "bootstrap-info.json"
    assert cache.read_bytes() == PAYLOAD
    assert stat.S_IMODE(cache.stat().st_mode) == 0o777


def test_read_fails_fast_on_garbage(tmp_path: Path):
    device = tmp_path / "dev" / "applianceVm.vport"
    device.parent.mkdir(parents=True)
    device.write_bytes(b"\x00garbage")

    clock = FakeClock()
    reader = _reader(tmp_path, clock)
    with pytest.raises(MalformedBootstrapError):
        reader.read(ReadinessSpec(timeout_seconds=300, interval_seconds=1))
    assert clock.sleeps == []
    assert not (tmp_path / "zvr" / "bootstrap-info.json").exists()


def test_read_times_out_on_empty_device(tmp_path: Path):
    device = tmp_path / "dev" / "applianceVm.vport"
    device.parent.mkdir(parents=True)
    device.write_bytes(b"  \n")

    clock = FakeClock()
    with pytest.raises(ReadinessTimeout):
        _reader(tmp_path, clock).read(ReadinessSpec(timeout_seconds=5, interval_seconds=1))
    assert clock.now == 5
