# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/vyos/directives.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List


class Op(str, Enum):
    SET = "set"
    DELETE = "delete"


@dataclass(frozen=True)
class Directive:
    op: Op
    path: str

    def text(self) -> str:
        return f"{self.op.value} {self.path}"

    def __str__(self) -> str:
        return self.text()


@dataclass
class DirectiveBatch:
    """Ordered directives applied to the configuration engine as one commit."""

    directives: List[Directive] = field(default_factory=list)

    def set(self, path: str) -> None:
        self.directives.append(Directive(Op.SET, path))

    def delete(self, path: str) -> None:
        self.directives.append(Directive(Op.DELETE, path))

    def extend(self, directives: Iterable[Directive]) -> None:
        self.directives.extend(directives)

    def sets(self) -> List[Directive]:
        return [d for d in self.directives if d.op is Op.SET]

    def deletes(self) -> List[Directive]:
        return [d for d in self.directives if d.op is Op.DELETE]

    def lines(self) -> List[str]:
        return [d.text() for d in self.directives]

    def __iter__(self) -> Iterator[Directive]:
        return iter(self.directives)

    def __len__(self) -> int:
        return len(self.directives)
