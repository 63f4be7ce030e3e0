import pytest

from vrboot.utils.net import canonical_mac, netmask_to_prefix


@pytest.mark.parametrize(
    "mask,prefix",
    [
        ("0.0.0.0", 0),
        ("128.0.0.0", 1),
        ("255.0.0.0", 8),
        ("255.255.0.0", 16),
        ("255.255.240.0", 20),
        ("255.255.255.0", 24),
        ("255.255.255.252", 30),
        ("255.255.255.255", 32),
    ],
)
def test_contiguous_masks(mask, prefix):
    assert netmask_to_prefix(mask) == prefix


@pytest.mark.parametrize("mask", ["255.0.255.0", "0.0.0.255", "255.255.255.1", "255.255.255", "abc", ""])
def test_rejects_invalid_masks(mask):
    with pytest.raises(ValueError):
        netmask_to_prefix(mask)


def test_canonical_mac():
    assert canonical_mac("52:54:00:AB:CD:EF") == "52:54:00:ab:cd:ef"
    assert canonical_mac(" 52-54-00-ab-cd-ef ") == "52:54:00:ab:cd:ef"
    with pytest.raises(ValueError):
        canonical_mac("52:54:00:ab:cd")
    with pytest.raises(ValueError):
        canonical_mac("52:54-00:ab:cd:ef")
