"""User objects.

User objects are problem-owned objects that compute values outside of the residual assembly (e.g., integrals,
lookups, material tables). They are executed by the problem at the execution points listed in `execute_on`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from Registry.objects import FrameworkObject
from Registry.parameters import InputParameters

from .utils import ExecFlag

if TYPE_CHECKING:
    from .problem import FEProblem


class UserObject(FrameworkObject):
    """Base class of user objects."""

    @classmethod
    def valid_params(cls) -> InputParameters:
        params = super().valid_params()
        params.add_param(
            "execute_on",
            tuple,
            (ExecFlag.TIMESTEP_END.value,),
            "Execution points at which this object runs.",
        )
        params.add_private_param("_fe_problem", object, None)
        return params

    def validate_params(self, params: InputParameters) -> None:
        for flag in params.get("execute_on"):
            ExecFlag.from_string(str(flag))

    def __init__(self, params: InputParameters) -> None:
        super().__init__(params)
        self._fe_problem: FEProblem | None = self.get_param("_fe_problem")
        self._execute_on: frozenset[ExecFlag] = frozenset(
            ExecFlag.from_string(str(f)) for f in self.get_param("execute_on")
        )

    @property
    def fe_problem(self) -> FEProblem:
        """Problem this object belongs to."""
        if self._fe_problem is None:
            raise RuntimeError(f"User object '{self.name}' is not attached to a problem.")
        return self._fe_problem

    @property
    def execute_on(self) -> frozenset[ExecFlag]:
        return self._execute_on

    def initialize(self) -> None:
        """Called before `execute()`."""

    def execute(self) -> None:
        """Compute."""

    def finalize(self) -> None:
        """Called after `execute()`."""


class GeneralUserObject(UserObject):
    """User object that is executed once per execution point, independently of the mesh."""
