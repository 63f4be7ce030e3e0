import textwrap

import pytest

from vrboot.vyos.config_tree import ConfigTree

SHOW = textwrap.dedent("""
    interfaces {
        ethernet eth0 {
            address 192.168.1.10/24
            description "management network"
            duplex auto
            hw-id 52:54:00:11:11:11
        }
        loopback lo {
        }
    }
    service {
        ssh {
            port 22
        }
    }
    system {
        /* the default user */
        login {
            user vyos {
                authentication {
                    encrypted-password ****************
                }
            }
        }
    }
    /* Warning: Do not remove the following line. */
    /* === vyatta-config-version: "system@6" === */
""")


def test_point_lookups():
    tree = ConfigTree.parse(SHOW)
    assert tree.exists("interfaces ethernet eth0")
    assert tree.exists("interfaces ethernet eth0 address 192.168.1.10/24")
    assert tree.exists("interfaces loopback lo")
    assert tree.exists("service ssh")
    assert tree.exists("system login user vyos authentication")
    assert not tree.exists("interfaces ethernet eth1")
    assert not tree.exists("service dns")


def test_leaf_values_and_quoted_words():
    tree = ConfigTree.parse(SHOW)
    assert tree.get("service ssh port").values() == ["22"]
    assert tree.get("interfaces ethernet eth0 description").values() == ["management network"]
    assert tree.exists('interfaces ethernet eth0 description "management network"')


def test_multi_line_comment_skipped():
    tree = ConfigTree.parse("/* first\n   second */\nservice {\n    ssh {\n    }\n}\n")
    assert tree.exists("service ssh")


def test_empty_output_is_an_empty_tree():
    assert not ConfigTree.parse("").exists("interfaces")


@pytest.mark.parametrize("text", ["interfaces {\n", "}\n"])
def test_unbalanced_braces(text):
    with pytest.raises(ValueError):
        ConfigTree.parse(text)


def test_load_runs_show_configuration():
    class Runner:
        def __init__(self):
            self.calls = []

        def run(self, cmd, check=False, **kw):
            self.calls.append((list(cmd), check))
            return type("CP", (), {"stdout": "service {\n    ssh {\n    }\n}\n", "returncode": 0})()

    runner = Runner()
    tree = ConfigTree.load(runner, ["show", "configuration"])
    assert runner.calls == [(["show", "configuration"], True)]
    assert tree.exists("service ssh")
