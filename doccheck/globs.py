"""Glob pattern validation, brace expansion and compilation."""

from __future__ import annotations

import re
from typing import List, Optional, Pattern, Tuple

from .errors import PatternError

_MAGIC_CHARS = frozenset("*?[{")
_NO_DOT = r"(?!\.)"
_GLOBSTAR_DIRS = r"(?:(?!\.)[^/]+/)*"
_GLOBSTAR_TAIL = r"(?:(?!\.)[^/]+(?:/(?!\.)[^/]+)*)?"


def normalize_pattern(pattern: str) -> str:
    """Strip surrounding whitespace and any leading ``./`` segments."""
    normalized = pattern.strip().replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    while "//" in normalized:
        normalized = normalized.replace("//", "/")
    return normalized


def validate_pattern(pattern: str) -> None:
    """Raise PatternError when ``pattern`` is not a usable glob."""
    if not isinstance(pattern, str) or not pattern.strip():
        raise PatternError("Empty glob pattern", pattern=pattern)
    if "\x00" in pattern:
        raise PatternError(f"Glob pattern contains a NUL byte: {pattern!r}", pattern=pattern)

    normalized = normalize_pattern(pattern)
    if not normalized:
        raise PatternError(f"Glob pattern matches nothing: {pattern!r}", pattern=pattern)

    depth = 0
    index = 0
    while index < len(normalized):
        char = normalized[index]
        if char == "[":
            close = _find_bracket_end(normalized, index)
            if close is None:
                raise PatternError(f"Unclosed '[' in glob pattern {pattern!r}", pattern=pattern)
            index = close + 1
            continue
        if char == "]":
            raise PatternError(f"Unbalanced ']' in glob pattern {pattern!r}", pattern=pattern)
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                raise PatternError(f"Unbalanced '}}' in glob pattern {pattern!r}", pattern=pattern)
        index += 1
    if depth:
        raise PatternError(f"Unclosed '{{' in glob pattern {pattern!r}", pattern=pattern)

    for expanded in expand_braces(normalized):
        for segment in expanded.split("/"):
            if "**" in segment and segment != "**":
                raise PatternError(
                    f"'**' must be a whole path segment in glob pattern {pattern!r}",
                    pattern=pattern,
                )


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives, preserving order and dropping repeats."""
    group = _find_brace_group(pattern)
    if group is None:
        return [pattern]
    start, end, options = group
    prefix, suffix = pattern[:start], pattern[end + 1 :]
    results: List[str] = []
    for option in options:
        for expanded in expand_braces(prefix + option + suffix):
            if expanded not in results:
                results.append(expanded)
    return results


def split_base(pattern: str) -> Tuple[str, str]:
    """Split a pattern into its literal directory prefix and the remainder."""
    segments = pattern.split("/")
    base: List[str] = []
    for segment in segments[:-1]:
        if any(char in _MAGIC_CHARS for char in segment):
            break
        base.append(segment)
    rest = segments[len(base) :]
    base_str = "/".join(base)
    if pattern.startswith("/") and not base_str:
        base_str = "/"
    return base_str, "/".join(rest)


def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile one brace-free glob into a regex matched against POSIX paths."""
    segments = pattern.split("/")
    pieces: List[str] = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            pieces.append(_GLOBSTAR_TAIL if last else _GLOBSTAR_DIRS)
            continue
        pieces.append(_translate_segment(segment))
        if not last:
            pieces.append("/")
    return re.compile("".join(pieces))


def _translate_segment(segment: str) -> str:
    # wildcards never match a leading dot, as with minimatch's dot: false
    result: List[str] = [_NO_DOT] if segment[:1] in ("*", "?", "[") else []
    index = 0
    while index < len(segment):
        char = segment[index]
        if char == "*":
            result.append("[^/]*")
        elif char == "?":
            result.append("[^/]")
        elif char == "[":
            close = _find_bracket_end(segment, index)
            if close is None:
                result.append(re.escape(char))
            else:
                body = segment[index + 1 : close]
                if body.startswith("!"):
                    body = "^" + body[1:]
                result.append("[" + body.replace("\\", "\\\\") + "]")
                index = close
        else:
            result.append(re.escape(char))
        index += 1
    return "".join(result)


def _find_bracket_end(text: str, start: int) -> Optional[int]:
    index = start + 1
    if index < len(text) and text[index] in "!^":
        index += 1
    if index < len(text) and text[index] == "]":
        index += 1
    while index < len(text):
        if text[index] == "]":
            return index
        if text[index] == "/":
            return None
        index += 1
    return None


def _find_brace_group(pattern: str) -> Optional[Tuple[int, int, List[str]]]:
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "[":
            close = _find_bracket_end(pattern, index)
            index = (close if close is not None else index) + 1
            continue
        if char != "{":
            index += 1
            continue
        depth = 0
        commas: List[int] = []
        for cursor in range(index, len(pattern)):
            current = pattern[cursor]
            if current == "{":
                depth += 1
            elif current == "}":
                depth -= 1
                if depth == 0:
                    if commas:
                        bounds = [index, *commas, cursor]
                        options = [
                            pattern[bounds[i] + 1 : bounds[i + 1]] for i in range(len(bounds) - 1)
                        ]
                        return index, cursor, options
                    break
            elif current == "," and depth == 1:
                commas.append(cursor)
        else:
            return None
        # literal group without alternatives, keep scanning after it
        index = cursor + 1
    return None


__all__ = [
    "compile_pattern",
    "expand_braces",
    "normalize_pattern",
    "split_base",
    "validate_pattern",
]
