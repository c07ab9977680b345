"""Finite element problem.

The problem is bound to one mesh object and hosts the objects that live on it: variables (dolfinx function spaces)
and user objects. It does not assemble or solve anything by itself.
"""

from __future__ import annotations

import logging
from typing import TypeVar

from basix.ufl import element
from dolfinx.fem import FunctionSpace, functionspace

from lib.loggingutils import log_global
from Meshing.core import MeshBase
from Meshing.utils import iCellType
from Registry.objects import FrameworkObject
from Registry.parameters import InputParameters

from .user_objects import UserObject
from .utils import ExecFlag, iElementFamily

logger = logging.getLogger(__name__)

U = TypeVar("U", bound=UserObject)


class FEProblem(FrameworkObject):
    """Finite element problem bound to a mesh."""

    @classmethod
    def valid_params(cls) -> InputParameters:
        params = super().valid_params()
        params.add_required_param("mesh", MeshBase, "Mesh the problem is defined on.")
        params.add_param("solve", bool, True, "Whether the problem should be solved.")
        return params

    def __init__(self, params: InputParameters) -> None:
        super().__init__(params)
        self._mesh: MeshBase | None = self.get_param("mesh")
        self._user_objects: dict[str, UserObject] = {}
        self._variables: dict[str, FunctionSpace] = {}

    def __repr__(self) -> str:
        return f"FEProblem(name={self.name!r}, mesh={self._mesh.name if self._mesh else None!r})"

    @property
    def mesh(self) -> MeshBase:
        """Mesh object the problem is bound to."""
        if self._mesh is None:
            raise RuntimeError(f"Problem '{self.name}' has been closed.")
        return self._mesh

    @property
    def solve(self) -> bool:
        return self.get_param("solve")

    def init(self) -> None:
        """Initialize the mesh."""
        self.mesh.init()

    # User objects ---

    def add_user_object(self, type_name: str, name: str, params: InputParameters) -> UserObject:
        """Build a user object through the application factory and attach it to this problem."""
        if name in self._user_objects:
            raise ValueError(f"Problem '{self.name}' already has a user object named '{name}'.")
        if self.app is None:
            raise RuntimeError(f"Problem '{self.name}' is not attached to an application.")
        cls = self.app.factory.get_class(type_name)
        if not issubclass(cls, UserObject):
            raise TypeError(f"Object type '{type_name}' builds {cls.__name__}, not UserObject.")

        params = params.copy()
        params.set("_fe_problem", self)
        obj = self.app.factory.create(type_name, name, params, UserObject)
        self._user_objects[name] = obj
        log_global(logger, logging.DEBUG, "Added user object '%s' (%s) to '%s'.", name, type_name, self.name)
        return obj

    def has_user_object(self, name: str) -> bool:
        return name in self._user_objects

    def get_user_object(self, name: str, expected: type[U] = UserObject) -> U:  # type: ignore[assignment]
        """Get a user object by name, checking its type."""
        try:
            obj = self._user_objects[name]
        except KeyError:
            raise KeyError(f"Problem '{self.name}' has no user object named '{name}'.") from None
        if not isinstance(obj, expected):
            raise TypeError(f"User object '{name}' is a {type(obj).__name__}, not a {expected.__name__}.")
        return obj

    @property
    def user_objects(self) -> list[UserObject]:
        """User objects in insertion order."""
        return list(self._user_objects.values())

    def execute(self, flag: ExecFlag | str) -> None:
        """Execute the user objects that run on `flag`, in insertion order."""
        flag = ExecFlag.from_string(flag) if isinstance(flag, str) else flag
        active = [uo for uo in self._user_objects.values() if flag in uo.execute_on]
        for uo in active:
            uo.initialize()
            uo.execute()
            uo.finalize()
        log_global(logger, logging.DEBUG, "Executed %d user object(s) on '%s'.", len(active), flag)

    # Variables ---

    def add_variable(
        self,
        name: str,
        family: iElementFamily | str = iElementFamily.LAGRANGE,
        order: int = 1,
        components: int = 1,
    ) -> FunctionSpace:
        """Add a variable, creating its function space on the (initialized) mesh."""
        if name in self._variables:
            raise ValueError(f"Problem '{self.name}' already has a variable named '{name}'.")
        if order < 0 or components < 1:
            raise ValueError("Variables require order >= 0 and at least one component.")

        family = iElementFamily.from_string(family) if isinstance(family, str) else family
        if order == 0 and not family.discontinuous:
            raise ValueError("Continuous variables require order >= 1.")

        mesh = self.mesh.init()
        cell = iCellType.from_dolfinx(mesh.topology.cell_type).to_basix()
        elem = element(
            family=family.to_basix(),
            cell=cell,
            degree=order,
            shape=(components,) if components > 1 else None,
            discontinuous=family.discontinuous,
        )
        space = functionspace(mesh, elem)
        self._variables[name] = space
        log_global(
            logger, logging.DEBUG, "Added variable '%s' (%s, order %d) to '%s'.", name, family.name, order, self.name
        )
        return space

    def has_variable(self, name: str) -> bool:
        return name in self._variables

    def get_variable(self, name: str) -> FunctionSpace:
        try:
            return self._variables[name]
        except KeyError:
            raise KeyError(f"Problem '{self.name}' has no variable named '{name}'.") from None

    @property
    def variable_names(self) -> list[str]:
        return list(self._variables)

    def close(self) -> None:
        """Drop the hosted objects and release the mesh."""
        self._user_objects.clear()
        self._variables.clear()
        self._mesh = None
