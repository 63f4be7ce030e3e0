# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/vyos/config_tree.py
from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence

from vrboot.execution.runner import CommandRunner

log = logging.getLogger("vrboot")


class ConfigSnapshot(Protocol):
    def exists(self, path: str) -> bool: ...


@dataclass
class ConfigNode:
    name: str
    children: Dict[str, "ConfigNode"] = field(default_factory=dict)

    def child(self, name: str) -> "ConfigNode":
        node = self.children.get(name)
        if node is None:
            node = self.children[name] = ConfigNode(name)
        return node

    def values(self) -> List[str]:
        return list(self.children)


class ConfigTree:
    """
    Read-only view of ``show configuration`` output.

    Block headers and leaves are split into words, so ``ethernet eth0 {`` and
    ``address 10.0.0.1/24`` both become nested nodes and a path such as
    ``interfaces ethernet eth0 address`` can be looked up word by word.
    """

    def __init__(self, root: Optional[ConfigNode] = None):
        self.root = root or ConfigNode("")

    @classmethod
    def parse(cls, text: str) -> "ConfigTree":
        root = ConfigNode("")
        stack: List[ConfigNode] = [root]
        in_comment = False

        for lineno, raw in enumerate(text.splitlines(), 1):
            line = raw.strip()
            if in_comment:
                if "*/" in line:
                    in_comment = False
                continue
            if not line:
                continue
            if line.startswith("/*"):
                in_comment = "*/" not in line
                continue

            if line == "}":
                if len(stack) == 1:
                    raise ValueError(f"unbalanced '}}' at line {lineno}")
                stack.pop()
                continue

            opens = line.endswith("{")
            words = shlex.split(line[:-1] if opens else line)
            node = stack[-1]
            for w in words:
                node = node.child(w)
            if opens:
                stack.append(node)

        if len(stack) != 1:
            raise ValueError("unterminated block in configuration")
        return cls(root)

    @classmethod
    def load(cls, runner: CommandRunner, command: Sequence[str]) -> "ConfigTree":
        result = runner.run(command, check=True)
        return cls.parse(result.stdout)

    def get(self, path: str) -> Optional[ConfigNode]:
        node = self.root
        for w in shlex.split(path):
            node = node.children.get(w)
            if node is None:
                return None
        return node

    def exists(self, path: str) -> bool:
        return self.get(path) is not None
