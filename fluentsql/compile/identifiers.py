"""Identifier quoting for column, table and alias references."""
from __future__ import annotations

import re

from fluentsql.compile.base import Grammar

_ALIAS_SPLIT = re.compile(r"\s+(as)\s+", re.IGNORECASE)


class IdentifierWrapper:
    """Quotes identifier references with a grammar's quote character.

    Handles the shapes accepted across the fluent API:

    * ``"name"`` → ```name```
    * ``"users.name"`` → ``` `users`.`name` ``` (every dot segment is quoted)
    * ``"users.*"`` / ``"*"`` → the star stays bare
    * ``"name as n"`` → ``` `name` as `n` ``` (``as`` kept as written)
    * already quoted segments are left alone

    Args:
        grammar: The dialect supplying the quote character.
    """

    def __init__(self, grammar: Grammar) -> None:
        self._grammar = grammar

    def __call__(self, value: str) -> str:
        return self.wrap(value)

    def wrap(self, value: str) -> str:
        parts = [p for p in _ALIAS_SPLIT.split(value.strip()) if p][:3]
        wrapped: list[str] = []
        for part in parts:
            if part == "*" or part.lower() == "as" or self._grammar.is_wrapped(part):
                wrapped.append(part)
                continue
            wrapped.append(self._wrap_segments(part))
        return " ".join(wrapped)

    def _wrap_segments(self, reference: str) -> str:
        segments = []
        for segment in reference.split("."):
            if segment == "*" or self._grammar.is_wrapped(segment):
                segments.append(segment)
            else:
                segments.append(self._grammar.wrap_identifier(segment))
        return ".".join(segments)
