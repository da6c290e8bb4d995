"""SQL toolkit factory.

Provides :func:`get_sql_toolkit`, the single entry point for check code.
Toolkits are cached per dialect behind a lock; the backend can be swapped
for tests.
"""

from __future__ import annotations

import threading
from typing import Callable

from ._protocols import SqlToolkit
from ._types import Dialect

_lock = threading.Lock()
_instances: dict[Dialect, SqlToolkit] = {}
_factory_fn: Callable[[Dialect], SqlToolkit] | None = None


def register_implementation(factory_fn: Callable[[Dialect], SqlToolkit]) -> None:
    """Register a factory creating a :class:`SqlToolkit` for a dialect.

    Drops every cached toolkit so the next lookup uses the new backend.
    If never called, the SQLGlot implementation is used.
    """
    global _factory_fn
    with _lock:
        _factory_fn = factory_fn
        _instances.clear()


def get_sql_toolkit(dialect: Dialect = Dialect.BIGQUERY) -> SqlToolkit:
    """Return the cached :class:`SqlToolkit` for *dialect*.

    Thread-safe.  Each dialect's toolkit is created on first use.
    """
    dialect = Dialect(dialect)
    toolkit = _instances.get(dialect)
    if toolkit is not None:
        return toolkit

    with _lock:
        toolkit = _instances.get(dialect)
        if toolkit is not None:
            return toolkit

        if _factory_fn is not None:
            toolkit = _factory_fn(dialect)
        else:
            from .impl.sqlglot_impl import SqlGlotToolkit

            toolkit = SqlGlotToolkit(dialect)

        _instances[dialect] = toolkit
        return toolkit


def reset_toolkit() -> None:
    """Forget cached toolkits and any registered backend.  **For testing only.**"""
    global _factory_fn
    with _lock:
        _instances.clear()
        _factory_fn = None
