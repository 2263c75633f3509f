"""Networks and compiled programs."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel

from .statements import Statement


class Network(BaseModel):
    """A single independently compiled block of IL statements."""

    label: str | None = None
    source: str | None = None
    statements: list[Statement] = []


class Program(BaseModel):
    """Networks in load order; executed as one concatenated sequence."""

    networks: list[Network] = []

    def statements(self) -> Iterator[Statement]:
        for network in self.networks:
            yield from network.statements

    def __len__(self) -> int:
        return sum(len(n.statements) for n in self.networks)
