"""Table registry.

The registry maps a caller-chosen table name to a declared model class, so code
that only knows a name (a generic "tables" list in a UI, for example) can get a
collection handle for it at runtime.

Models known when the application is written are best registered in bulk from
an ``Enum`` of model kinds via ``register_known``; ``register_table`` covers
models that only become known at runtime.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Protocol, Type

from appdb.core.errors import DuplicateTableError, TableNotFoundError

logger = logging.getLogger(__name__)


class DuplicatePolicy(str, Enum):
    """What ``register_table`` does when a name is already mapped to another model."""

    overwrite = "overwrite"  # Last registration wins.
    error = "error"  # Raise DuplicateTableError.


@dataclass(frozen=True)
class TableMapping:
    """One registered ``name -> model_type`` pair."""

    name: str
    model_type: Type[Any]


class CollectionProvider(Protocol):
    """Anything that can hand out a collection handle for a model class."""

    def collection(self, model_type: Type[Any]) -> Any:
        ...


class TableRegistry:
    """
    Thread-safe mapping of table names to model classes.

    One registry is normally created by the application's composition root
    (``AppDbContext`` builds one when none is given) and passed by reference to
    whatever needs name-based lookup.

    Notes:
        - Under ``DuplicatePolicy.overwrite`` (the default) ``register_table``
          replaces any existing mapping for the name.
        - Under ``DuplicatePolicy.error`` remapping a name to a different model
          raises ``DuplicateTableError``. Registering the identical pair again is
          always accepted.
        - ``resolve`` raises ``TableNotFoundError`` if the name is missing;
          ``find`` returns ``None`` instead.
    """

    def __init__(self, policy: DuplicatePolicy = DuplicatePolicy.overwrite) -> None:
        """
        Initialize an empty table registry.

        Args:
            policy: Behavior when a name is registered a second time.
        """
        self._policy = DuplicatePolicy(policy)
        self._tables: Dict[str, Type[Any]] = {}
        self._lock = threading.RLock()

    @property
    def policy(self) -> DuplicatePolicy:
        return self._policy

    def register_table(self, name: str, model_type: Type[Any]) -> None:
        """
        Register a model class under a table name.

        Args:
            name: Non-empty identifier chosen by the caller.
            model_type: The model class the name stands for.

        Raises:
            ValueError: If ``name`` is empty.
            TypeError: If ``model_type`` is not a class.
            DuplicateTableError: If the name is taken by another model and the
                policy is ``DuplicatePolicy.error``.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("table name must be a non-empty string")
        if not isinstance(model_type, type):
            raise TypeError(f"model_type must be a class, got {type(model_type).__name__}")

        with self._lock:
            existing = self._tables.get(name)
            if existing is not None and existing is not model_type:
                if self._policy is DuplicatePolicy.error:
                    raise DuplicateTableError(name, existing, model_type)
                logger.warning(
                    "Table '%s' remapped from %s to %s", name, existing.__name__, model_type.__name__
                )
            self._tables[name] = model_type
        logger.debug("Registered table '%s' -> %s", name, model_type.__name__)

    def register_known(self, kinds: Type[Enum]) -> None:
        """
        Register every member of an enumeration of model kinds.

        Each member's value must be a model class. The member name is used as
        the table name unless the model class defines ``__registry_name__``.

        Args:
            kinds: An ``Enum`` subclass whose values are model classes.
        """
        # __members__ includes aliases, which plain iteration skips
        for member_name, member in kinds.__members__.items():
            model_type = member.value
            name = getattr(model_type, "__registry_name__", None) or member_name
            self.register_table(name, model_type)

    def resolve(self, name: str) -> Type[Any]:
        """
        Retrieve the model class registered under a name.

        Args:
            name: The table name.

        Returns:
            The registered model class.

        Raises:
            TableNotFoundError: If nothing is registered under ``name``.
        """
        with self._lock:
            try:
                return self._tables[name]
            except KeyError:
                raise TableNotFoundError(name) from None

    def find(self, name: str) -> Optional[Type[Any]]:
        """Like ``resolve`` but returns ``None`` for an unknown name."""
        with self._lock:
            return self._tables.get(name)

    def get_collection(self, provider: CollectionProvider, name: str) -> Any:
        """
        Resolve a name and ask the provider for the matching collection.

        Args:
            provider: The engine handle exposing ``collection(model_type)``.
            name: The table name.

        Returns:
            Whatever the provider returns for the resolved model class.

        Raises:
            TableNotFoundError: If nothing is registered under ``name``.
        """
        model_type = self.resolve(name)
        return provider.collection(model_type)

    def has(self, name: str) -> bool:
        """
        Check if a table name is registered.

        Args:
            name: The table name to check.

        Returns:
            True if registered, False otherwise.
        """
        with self._lock:
            return name in self._tables

    def names(self) -> List[str]:
        """Registered table names in sorted order."""
        with self._lock:
            return sorted(self._tables)

    def mappings(self) -> List[TableMapping]:
        """Snapshot of all registrations, sorted by name."""
        with self._lock:
            return [TableMapping(name, self._tables[name]) for name in sorted(self._tables)]

    def unregister(self, name: str) -> bool:
        """
        Remove a registration.

        Returns:
            True if the name was registered, False otherwise.
        """
        with self._lock:
            return self._tables.pop(name, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._tables

    def __len__(self) -> int:
        with self._lock:
            return len(self._tables)

    def __iter__(self) -> Iterator[TableMapping]:
        return iter(self.mappings())
