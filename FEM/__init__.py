"""Initialize framework FEM objects."""

from .problem import FEProblem
from .user_objects import GeneralUserObject, UserObject
from .utils import ExecFlag, iElementFamily

__all__ = [
    "ExecFlag",
    "FEProblem",
    "UserObject",
    "iElementFamily",
    "GeneralUserObject",
]
