"""printf-style string formatting."""

from __future__ import annotations

import re

_SPEC = re.compile(
    r"%(?P<flags>[-+ #0]*)(?P<width>\*|\d+)?(?:\.(?P<prec>\*|\d+))?"
    r"(?P<length>hh|h|ll|l|L|q|j|z|t)?(?P<conv>[diouxXeEfFgGcs%])"
)


def _strip_length(match: re.Match) -> str:
    width = match.group("width") or ""
    prec = match.group("prec")
    prec_part = f".{prec}" if prec is not None else ""
    return f"%{match.group('flags')}{width}{prec_part}{match.group('conv')}"


def str_format(fmt: str, *args) -> str:
    """Format ``args`` with a printf-style format string.

    C length modifiers such as ``l``, ``ll`` or ``z`` are accepted and ignored.
    Raises ValueError when the arguments do not fit the format.
    """
    pattern = _SPEC.sub(_strip_length, fmt)
    try:
        return pattern % args
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"str_format: cannot format {fmt!r}: {exc}") from exc