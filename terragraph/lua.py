"""
Lua source helpers for the Luamap target: literal formatting, identifiers,
runtime helper functions, and a structural sanity check of generated code.
"""

from __future__ import annotations

import math
import re
from typing import Dict, List

_IDENT_INVALID = re.compile(r"[^a-z0-9_]")
_STRING_LITERAL = re.compile(r'"(?:[^"\\\n]|\\.)*"' + r"|'(?:[^'\\\n]|\\.)*'")
_LINE_COMMENT = re.compile(r"--[^\n]*")
_BLOCK_WORD = re.compile(r"\b(function|if|do|repeat|end|until)\b")

LUA_OPERATORS = {"<": "<", "<=": "<=", ">": ">", ">=": ">=", "==": "==", "!=": "~="}

LUA_HELPERS: Dict[str, str] = {
    "mandelbrot": (
        "-- Mandelbrot escape steps\n"
        "local function mandelbrot(x, z, steps)\n"
        "    local a = 0\n"
        "    local b = 0\n"
        "    for i = 0, steps do\n"
        "        local old_a = a\n"
        "        a = (a^2 - b^2) + x\n"
        "        b = 2 * old_a * b + z\n"
        "        if a^2 + b^2 > 20 then return i end\n"
        "    end\n"
        "    return steps\n"
        "end\n"
    ),
    "gaussian": (
        "-- Gaussian falloff\n"
        "local function gaussian(x, y, z, cx, cy, cz, spread)\n"
        "    local dx = x - cx\n"
        "    local dy = y - cy\n"
        "    local dz = z - cz\n"
        "    local dist_sq = dx * dx + dy * dy + dz * dz\n"
        "    return math.exp(-dist_sq / (2 * spread * spread))\n"
        "end\n"
    ),
}


def lua_number(value) -> str:
    """Numeric literal; integral floats drop the fraction, non-finite map to Lua expressions."""
    if isinstance(value, bool):
        return "1" if value else "0"
    value = float(value)
    if math.isnan(value):
        return "(0/0)"
    if math.isinf(value):
        return "math.huge" if value > 0 else "(-math.huge)"
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def lua_string(value: str) -> str:
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def sanitize_identifier(name: str) -> str:
    return _IDENT_INVALID.sub("_", str(name).lower())


def content_var(name: str) -> str:
    """Local holding the content id of a terrain type, e.g. ``c_dirt_with_grass``."""
    return f"c_{sanitize_identifier(name)}"


def check_syntax(code: str) -> List[str]:
    """
    Cheap structural check: balanced brackets and block openers vs ``end``.
    Not a parser; returns one message per imbalance.
    """
    stripped = _LINE_COMMENT.sub("", _STRING_LITERAL.sub('""', code))
    errors: List[str] = []
    for open_ch, close_ch, label in (("(", ")", "parentheses"), ("{", "}", "braces"), ("[", "]", "brackets")):
        opened = stripped.count(open_ch)
        closed = stripped.count(close_ch)
        if opened != closed:
            errors.append(f"Generated code has unbalanced {label}: {opened} opening vs {closed} closing")

    words = _BLOCK_WORD.findall(stripped)
    openers = sum(1 for w in words if w in ("function", "if", "do"))
    closers = words.count("end")
    if openers != closers:
        errors.append(f"Generated code has {openers} block openers (function/if/do) but {closers} 'end'")
    if words.count("repeat") != words.count("until"):
        errors.append("Generated code has unbalanced repeat/until")
    return errors
