"""Signature cipher program: canonical operations and their execution.

A program is recovered from the player script once and is then applied
to any number of signatures.  Operations never mutate their input, so
``CipherProgram.apply`` is pure and deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Reverse:
    """Reverse the whole character sequence."""

    def apply(self, chars: list[str]) -> list[str]:
        return chars[::-1]


@dataclass(frozen=True)
class SwapWithFront:
    """Swap position 0 with ``index mod len(chars)``."""

    index: int

    def apply(self, chars: list[str]) -> list[str]:
        if not chars:
            return []
        out = list(chars)
        pos = self.index % len(out)
        out[0], out[pos] = out[pos], out[0]
        return out


@dataclass(frozen=True)
class DropFront:
    """Remove the first ``count`` characters (clamped to the length)."""

    count: int

    def apply(self, chars: list[str]) -> list[str]:
        return chars[max(self.count, 0) :]


CipherOperation = Reverse | SwapWithFront | DropFront


@dataclass(frozen=True)
class CipherProgram:
    """Ordered list of operations recovered from one player script."""

    operations: tuple[CipherOperation, ...] = ()

    def apply(self, signature: str) -> str:
        chars = list(signature)
        for op in self.operations:
            chars = op.apply(chars)
        return "".join(chars)

    def __len__(self) -> int:
        return len(self.operations)
