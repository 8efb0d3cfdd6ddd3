"""Grammar registry (Open/Closed Principle).

Maps a driver tag (``"mysql"``, ``"pgsql"``, ``"sqlite"``) to a factory
returning a :class:`~fluentsql.compile.base.Grammar`.  The registry is a plain
object: each caller owns its instance, so registering a custom grammar never
leaks into unrelated code or tests.

Usage::

    from fluentsql.compile.registry import default_registry

    registry = default_registry()

    @registry.register("mariadb")
    class MariaDbGrammar(MySqlGrammar):
        ...

    grammar = registry.create("mariadb")
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from fluentsql.compile.base import Grammar
from fluentsql.compile.mysql import MySqlGrammar
from fluentsql.compile.postgres import PgSqlGrammar
from fluentsql.compile.sqlite import SqliteGrammar
from fluentsql.errors import UnsupportedDriverError

logger = logging.getLogger(__name__)

#: Zero-argument callable producing a grammar; a Grammar subclass qualifies.
GrammarFactory = Callable[[], Grammar]


class GrammarRegistry:
    """Registry mapping driver tags to grammar factories.

    Example::

        registry = GrammarRegistry()
        registry.register_factory("mysql", MySqlGrammar)
        grammar = registry.create("mysql")
    """

    def __init__(self) -> None:
        self._factories: dict[str, GrammarFactory] = {}

    def register(self, driver: str) -> Callable[[type[Grammar]], type[Grammar]]:
        """Decorator that registers a grammar class under ``driver``.

        Args:
            driver: The driver tag (e.g. ``"mysql"``).

        Returns:
            A decorator that registers and returns the grammar class.
        """

        def decorator(grammar_cls: type[Grammar]) -> type[Grammar]:
            self.register_factory(driver, grammar_cls)
            return grammar_cls

        return decorator

    def register_factory(self, driver: str, factory: GrammarFactory) -> None:
        """Register ``factory`` without using the decorator form.

        A later registration under the same tag replaces the earlier one.
        """
        logger.debug("Registering grammar factory %r for driver %r", factory, driver)
        self._factories[driver] = factory

    def create(self, driver: str) -> Grammar:
        """Instantiate the grammar registered for ``driver``.

        Raises:
            UnsupportedDriverError: If no factory is registered for ``driver``.
        """
        if driver not in self:
            raise UnsupportedDriverError(driver, self.registered_drivers())
        return self._factories[driver]()

    def registered_drivers(self) -> list[str]:
        """Return the sorted list of registered driver tags."""
        return sorted(self._factories)

    def __contains__(self, driver: object) -> bool:
        return driver in self._factories


def default_registry() -> GrammarRegistry:
    """Return a fresh registry holding the built-in grammars."""
    registry = GrammarRegistry()
    registry.register_factory("mysql", MySqlGrammar)
    registry.register_factory("pgsql", PgSqlGrammar)
    registry.register_factory("postgres", PgSqlGrammar)
    registry.register_factory("sqlite", SqliteGrammar)
    return registry
