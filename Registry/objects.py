"""Base class for factory-constructable framework objects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from lib.loggingutils import log_global

from .parameters import InputParameters

if TYPE_CHECKING:
    from .app import Application

logger = logging.getLogger(__name__)


class FrameworkObject:
    """Base class of every object the factory can build.

    Subclasses declare their options by extending `valid_params()`, and read them back through `get_param()`. When the
    parameters carry an application (`_app`), the object registers itself in that application's object registry.
    """

    @classmethod
    def valid_params(cls) -> InputParameters:
        """Declare the parameters accepted by this object type."""
        params = InputParameters()
        params.add_private_param("_type", str, cls.__name__)
        params.add_private_param("_object_name", str)
        params.add_private_param("_app", object, None)
        return params

    def __init__(self, params: InputParameters) -> None:
        name = params.get("_object_name") if params.is_param_valid("_object_name") else ""
        if not name:
            raise ValueError(f"{type(self).__name__} objects require a non-empty '_object_name'.")
        params.check_params(name)
        self.validate_params(params)

        self._params = params.copy()
        self._name: str = name
        self._type: str = params.get("_type")
        self._app: Application | None = params.get("_app")

        if self._app is not None:
            self._app.register_object(self)
        log_global(logger, logging.DEBUG, "Constructed %s '%s'.", self._type, self._name)

    def validate_params(self, params: InputParameters) -> None:
        """Check parameter values before the object is registered. Raise to abort construction."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"

    @property
    def name(self) -> str:
        """Object name."""
        return self._name

    @property
    def type(self) -> str:
        """Registered type name."""
        return self._type

    @property
    def app(self) -> Application | None:
        """Application this object belongs to (if any)."""
        return self._app

    @property
    def params(self) -> InputParameters:
        """Parameters the object was built with."""
        return self._params

    def get_param(self, name: str) -> Any:
        return self._params.get(name)
