"""Compilation context value object.

Packages the ``(grammar, config)`` pair shared by
:class:`~fluentsql.compile.compiler.QueryCompiler`, the conditions compiler and
the identifier wrapper into a single cohesive object.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from fluentsql.compile.base import Grammar
from fluentsql.config import CompilerConfig


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context for every compilation run of one compiler.

    Attributes:
        grammar: Dialect-specific identifier rules.
        config: Compiler settings (empty-IN policy, ...).
    """

    grammar: Grammar
    config: CompilerConfig = field(default_factory=CompilerConfig)
