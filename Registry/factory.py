"""Object factory.

Maps registered type names to `FrameworkObject` subclasses. The factory belongs to one application; there is no
process-wide registry.
"""

from __future__ import annotations

import difflib
import logging
from collections import Counter
from typing import TYPE_CHECKING, Iterable, TypeVar

from lib.loggingutils import log_global

from .objects import FrameworkObject
from .parameters import InputParameters

if TYPE_CHECKING:
    from .app import Application

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=FrameworkObject)


class Factory:
    """Registry of constructable object types."""

    def __init__(self, app: Application | None = None) -> None:
        self._app = app
        self._types: dict[str, type[FrameworkObject]] = {}
        self._created: Counter[str] = Counter()

    def __repr__(self) -> str:
        return f"Factory(types={len(self._types)})"

    @property
    def app(self) -> Application | None:
        return self._app

    def register(self, cls: type[FrameworkObject], type_name: str | None = None) -> None:
        """Register an object type, under its class name unless `type_name` is given."""
        if not (isinstance(cls, type) and issubclass(cls, FrameworkObject)):
            raise TypeError(f"Only FrameworkObject subclasses can be registered, got {cls!r}.")
        name = type_name or cls.__name__
        if name in self._types:
            raise ValueError(f"Object type '{name}' is already registered.")
        self._types[name] = cls
        log_global(logger, logging.DEBUG, "Registered object type '%s'.", name)

    def register_all(self, classes: Iterable[type[FrameworkObject]]) -> None:
        for cls in classes:
            self.register(cls)

    def is_registered(self, type_name: str) -> bool:
        return type_name in self._types

    def registered_types(self) -> list[str]:
        """Registered type names, sorted."""
        return sorted(self._types)

    def get_class(self, type_name: str) -> type[FrameworkObject]:
        """Get the class registered under `type_name`."""
        try:
            return self._types[type_name]
        except KeyError:
            close = difflib.get_close_matches(type_name, self._types, n=3)
            hint = f" Did you mean: {', '.join(close)}?" if close else ""
            raise KeyError(f"Object type '{type_name}' is not registered.{hint}") from None

    def get_valid_params(self, type_name: str) -> InputParameters:
        """Get the default parameters of a registered type, bound to this factory's application."""
        params = self.get_class(type_name).valid_params()
        params.set_default("_type", type_name)
        params.set_default("_app", self._app)
        return params

    def create(
        self,
        type_name: str,
        name: str,
        params: InputParameters,
        expected: type[T] | None = None,
    ) -> T:
        """Build an object of a registered type.

        Args:
            type_name: Registered type name.
            name: Object name (overrides any `_object_name` already in `params`).
            params: Parameters, usually obtained from `get_valid_params()`.
            expected (optional): Class the created object must be an instance of.
        """
        cls = self.get_class(type_name)
        if expected is not None and not issubclass(cls, expected):
            raise TypeError(f"Object type '{type_name}' builds {cls.__name__}, not {expected.__name__}.")

        params = params.copy()
        params.set_default("_type", type_name)
        params.set_default("_object_name", name)
        if params.get("_app") is None:
            params.set_default("_app", self._app)

        obj = cls(params)
        self._created[name] += 1
        log_global(logger, logging.DEBUG, "Created %s '%s'.", type_name, name)
        return obj  # type: ignore[return-value]

    def created_count(self, name: str) -> int:
        """Number of objects this factory has built under `name`."""
        return self._created[name]
