"""Applications and the application factory.

An application scopes one object factory and one object registry. Applications are created by name through an
`AppFactory`, which plays the role of the registry of application types.
"""

from __future__ import annotations

import argparse
import logging
import weakref
from typing import TYPE_CHECKING, Callable, Sequence, TypeVar

from lib.loggingutils import log_global

from .factory import Factory
from .objects import FrameworkObject

if TYPE_CHECKING:
    from config import InputConfig, ObjectBlockConfig
    from FEM.problem import FEProblem
    from Meshing.core import MeshBase
    from .parameters import InputParameters

logger = logging.getLogger(__name__)

A = TypeVar("A", bound="Application")

_FRAMEWORK_LOGGERS: tuple[str, ...] = ("Registry", "Meshing", "FEM", "Testing")


def _build_parser(prog: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, add_help=False, exit_on_error=False)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log DEBUG messages from the framework.")
    parser.add_argument(
        "--allow-unused",
        action="store_true",
        help="Ignore input file parameters that the target object does not declare.",
    )
    return parser


def _parse_options(name: str, argv: Sequence[str] | None) -> argparse.Namespace:
    try:
        options, unknown = _build_parser(name).parse_known_args(list(argv or []))
    except argparse.ArgumentError as e:
        raise ValueError(f"Invalid arguments for application '{name}': {e}") from e
    if unknown:
        raise ValueError(f"Invalid arguments for application '{name}': unrecognized {' '.join(unknown)}.")
    return options


class Application:
    """A configured framework instance.

    Subclasses add their own object types by extending `register_objects()`.
    """

    def __init__(self, name: str, argv: Sequence[str] | None = None) -> None:
        if not name:
            raise ValueError("Application name must be non-empty.")
        self._name = name
        self._options = _parse_options(name, argv)
        if self._options.verbose:
            for logger_name in _FRAMEWORK_LOGGERS:
                logging.getLogger(logger_name).setLevel(logging.DEBUG)
        self._objects: weakref.WeakValueDictionary[str, FrameworkObject] = weakref.WeakValueDictionary()
        self._factory = Factory(self)
        self.register_objects(self._factory)
        log_global(
            logger,
            logging.DEBUG,
            "Application '%s' ready with %d object types.",
            name,
            len(self._factory.registered_types()),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def factory(self) -> Factory:
        """Object factory of this application."""
        return self._factory

    @property
    def options(self) -> argparse.Namespace:
        """Parsed command-line options."""
        return self._options

    def register_objects(self, factory: Factory) -> None:
        """Register the framework object types."""
        from FEM.problem import FEProblem
        from FEM.user_objects import GeneralUserObject
        from Meshing.core import GeneratedMesh

        factory.register_all([GeneratedMesh, FEProblem, GeneralUserObject])

    # Object registry ---

    def register_object(self, obj: FrameworkObject) -> None:
        """Record a constructed object.

        Only a weak reference is kept: the registry never extends the lifetime of the objects it tracks.
        """
        if obj.name in self._objects:
            raise ValueError(f"An object named '{obj.name}' already exists in application '{self._name}'.")
        self._objects[obj.name] = obj

    def has_object(self, name: str) -> bool:
        return name in self._objects

    def get_object(self, name: str) -> FrameworkObject:
        try:
            return self._objects[name]
        except KeyError as e:
            raise KeyError(f"No live object named '{name}' in application '{self._name}'.") from e

    def object_names(self) -> list[str]:
        """Names of the live objects, sorted."""
        return sorted(self._objects.keys())

    # Input files ---

    def build_from_input(self, cfg: InputConfig) -> tuple[MeshBase, FEProblem]:
        """Build the mesh, the problem and its user objects described by an input file."""
        from FEM.problem import FEProblem
        from Meshing.core import MeshBase

        mesh = self._factory.create(cfg.mesh.type, cfg.mesh.name, self._block_params(cfg.mesh), MeshBase)

        problem_params = self._block_params(cfg.problem)
        problem_params.set("mesh", mesh)
        problem = self._factory.create(cfg.problem.type, cfg.problem.name, problem_params, FEProblem)

        for block in cfg.user_objects:
            problem.add_user_object(block.type, block.name, self._block_params(block))

        log_global(
            logger,
            logging.INFO,
            "Built '%s' from input: mesh '%s', %d user object(s).",
            problem.name,
            mesh.name,
            len(cfg.user_objects),
        )
        return mesh, problem

    def _block_params(self, block: ObjectBlockConfig) -> InputParameters:
        params = self._factory.get_valid_params(block.type)
        for key, raw in block.params.items():
            if key not in params and self._options.allow_unused:
                log_global(logger, logging.WARNING, "Ignoring unused parameter '%s' in '%s'.", key, block.name)
                continue
            try:
                params.set_from_input(key, raw)
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid parameter '{key}' in block '{block.name}': {e}") from e
        return params


class AppFactory:
    """Registry of application types."""

    def __init__(self) -> None:
        self._apps: dict[str, type[Application]] = {}

    def register(self, name: str, cls: type[Application]) -> None:
        if not (isinstance(cls, type) and issubclass(cls, Application)):
            raise TypeError(f"Only Application subclasses can be registered, got {cls!r}.")
        if name in self._apps:
            raise ValueError(f"Application '{name}' is already registered.")
        self._apps[name] = cls

    def register_app(self, name: str) -> Callable[[type[A]], type[A]]:
        """Class decorator form of `register()`."""

        def decorator(cls: type[A]) -> type[A]:
            self.register(name, cls)
            return cls

        return decorator

    def unregister(self, name: str) -> None:
        self._apps.pop(name, None)

    def is_registered(self, name: str) -> bool:
        return name in self._apps

    def registered_apps(self) -> list[str]:
        return sorted(self._apps)

    def create_app(self, name: str, argv: Sequence[str] | None = None) -> Application:
        """Create an application instance of a registered type."""
        try:
            cls = self._apps[name]
        except KeyError:
            known = ", ".join(self.registered_apps()) or "none"
            raise KeyError(f"Application '{name}' is not registered (registered: {known}).") from None
        log_global(logger, logging.DEBUG, "Creating application '%s'.", name)
        return cls(name, argv)


app_factory = AppFactory()
"""Default application factory."""
app_factory.register("Framework", Application)
