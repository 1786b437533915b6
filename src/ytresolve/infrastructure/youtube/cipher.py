"""Recover the signature cipher program from the player script.

The player deciphers a stream signature with a small function of the form::

    Xy=function(a){a=a.split("");Wz.Ab(a,3);Wz.Cd(a,45);return a.join("")}

where ``Wz`` is a helper object whose members each perform one of three
operations on the character array: reverse it, swap the first element
with another one, or splice elements off the front.  Names change with
every player release, so everything here matches on code *shape*:

1. find the entry function (one parameter, split, helper calls, join),
2. collect the ordered ``(method, argument)`` calls on the shared helper,
3. locate the helper object literal and classify each referenced member,
4. emit a ``CipherProgram`` in call order.

Any mismatch raises ``DecodeUnavailableError``; callers skip the affected
format instead of failing the whole request.
"""

from __future__ import annotations

import re
from typing import Callable

import structlog

from ytresolve.domain.entities.cipher import (
    CipherOperation,
    CipherProgram,
    DropFront,
    Reverse,
    SwapWithFront,
)
from ytresolve.domain.exceptions import DecodeUnavailableError

log = structlog.get_logger(__name__)

_IDENT = r"[a-zA-Z_$][\w$]*"

# function [name](a){a=a.split("");<calls>return a.join("")}
_ENTRY_RE = re.compile(
    r"function(?:\s+" + _IDENT + r")?\s*\(\s*(?P<arg>" + _IDENT + r")\s*\)\s*\{\s*"
    r"(?P=arg)\s*=\s*(?P=arg)\.split\(\s*(?:\"\"|'')\s*\)\s*;"
    r"(?P<body>[^{}]*?)"
    r"return\s+(?P=arg)\.join\(\s*(?:\"\"|'')\s*\)"
)

# Wz.Ab(a,3) or Wz["Ab"](a,3)
_CALL_RE = re.compile(
    r"(?P<obj>" + _IDENT + r")"
    r"(?:\.(?P<m1>" + _IDENT + r")|\[\s*(?P<q>[\"'])(?P<m2>" + _IDENT + r")(?P=q)\s*\])"
    r"\(\s*(?P<arg>" + _IDENT + r")\s*(?:,\s*(?P<n>-?\d+)\s*)?\)"
)

_MEMBER_HEAD_RE = re.compile(
    r"(?:^|,)\s*(?P<q>[\"']?)(?P<name>" + _IDENT + r")(?P=q)\s*:\s*"
    r"function\s*\((?P<params>[^)]*)\)\s*\{"
)

_QUOTES = frozenset("\"'`")


def _block_end(text: str, open_idx: int) -> int | None:
    """Index of the ``}`` closing the ``{`` at *open_idx*.

    String literals are skipped so braces inside them do not count.
    """
    depth = 0
    quote: str | None = None
    i = open_idx
    while i < len(text):
        ch = text[i]
        if quote is not None:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def _parse_pipeline(
    arg: str, body: str
) -> tuple[str, list[tuple[str, int | None]]] | None:
    """Parse ``H.m(a,n);H.m2(a);...`` into the helper name and its calls.

    Returns ``None`` unless every statement is a call on one shared
    helper that passes the entry parameter first.
    """
    helper: str | None = None
    calls: list[tuple[str, int | None]] = []
    for stmt in body.split(";"):
        stmt = stmt.strip()
        if not stmt:
            continue
        call = _CALL_RE.fullmatch(stmt)
        if call is None or call.group("arg") != arg:
            return None
        if helper is not None and call.group("obj") != helper:
            return None
        helper = call.group("obj")
        n = call.group("n")
        calls.append((call.group("m1") or call.group("m2"), int(n) if n else None))
    if helper is None:
        return None
    return helper, calls


def _find_entry_calls(script: str) -> tuple[str, list[tuple[str, int | None]]]:
    """Return the helper name and ordered calls of the entry function."""
    for m in _ENTRY_RE.finditer(script):
        pipeline = _parse_pipeline(m.group("arg"), m.group("body"))
        if pipeline is not None:
            return pipeline
    raise DecodeUnavailableError("signature entry function not found")


def _parse_members(obj_body: str) -> dict[str, tuple[list[str], str]]:
    """Map member name -> (parameter names, function body)."""
    members: dict[str, tuple[list[str], str]] = {}
    pos = 0
    while True:
        head = _MEMBER_HEAD_RE.search(obj_body, pos)
        if head is None:
            return members
        open_idx = head.end() - 1
        close_idx = _block_end(obj_body, open_idx)
        if close_idx is None:
            return members
        params = [p.strip() for p in head.group("params").split(",") if p.strip()]
        members[head.group("name")] = (params, obj_body[open_idx + 1 : close_idx])
        pos = close_idx + 1


def _find_helper_members(
    script: str, helper: str, needed: set[str]
) -> dict[str, tuple[list[str], str]]:
    decl = re.compile(r"(?:^|[,;{}\s])" + re.escape(helper) + r"\s*=\s*\{")
    for m in decl.finditer(script):
        open_idx = m.end() - 1
        close_idx = _block_end(script, open_idx)
        if close_idx is None:
            continue
        members = _parse_members(script[open_idx + 1 : close_idx])
        if needed <= members.keys():
            return members
    raise DecodeUnavailableError(f"helper object {helper!r} not found")


def _classify(params: list[str], body: str) -> str | None:
    """Return ``"reverse"``, ``"swap"`` or ``"drop"`` for a member body."""
    if not params:
        return None
    a = re.escape(params[0])
    body = body.strip().rstrip(";").strip()

    if re.fullmatch(rf"(?:return\s+)?{a}\.reverse\(\s*\)", body):
        return "reverse"
    if len(params) < 2:
        return None
    b = re.escape(params[1])
    if re.fullmatch(rf"(?:return\s+)?{a}\.splice\(\s*0\s*,\s*{b}\s*\)", body):
        return "drop"
    swap = (
        rf"var\s+(?P<t>{_IDENT})\s*=\s*{a}\[\s*0\s*\]\s*;"
        rf"\s*{a}\[\s*0\s*\]\s*=\s*{a}\[\s*(?P<idx>{b}(?:\s*%\s*{a}\.length)?)\s*\]\s*;"
        rf"\s*{a}\[\s*(?P=idx)\s*\]\s*=\s*(?P=t)"
    )
    if re.fullmatch(swap, body):
        return "swap"
    return None


_FACTORIES: dict[str, Callable[[int], CipherOperation]] = {
    "swap": SwapWithFront,
    "drop": DropFront,
}


def derive_cipher_program(script: str) -> CipherProgram:
    """Derive the cipher program from player script text.

    A pure function of *script*.  Raises ``DecodeUnavailableError`` when
    the entry function, the helper object or a member shape cannot be
    recognised.
    """
    if not script:
        raise DecodeUnavailableError("empty player script")

    helper, calls = _find_entry_calls(script)
    members = _find_helper_members(script, helper, {name for name, _ in calls})

    kinds: dict[str, str] = {}
    for name in {name for name, _ in calls}:
        params, body = members[name]
        kind = _classify(params, body)
        if kind is None:
            raise DecodeUnavailableError(f"unknown helper shape: {helper}.{name}")
        kinds[name] = kind

    ops: list[CipherOperation] = []
    for name, arg in calls:
        kind = kinds[name]
        if kind == "reverse":
            ops.append(Reverse())
            continue
        if arg is None:
            raise DecodeUnavailableError(f"missing argument for {helper}.{name}")
        ops.append(_FACTORIES[kind](arg))

    log.debug("youtube_cipher_derived", helper=helper, operations=len(ops))
    return CipherProgram(tuple(ops))


class CipherEngine:
    """Derives cipher programs and applies them to signatures."""

    def derive(self, script: str) -> CipherProgram:
        return derive_cipher_program(script)

    def apply(self, program: CipherProgram, signature: str) -> str:
        return program.apply(signature)
