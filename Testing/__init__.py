"""Initialize framework testing helpers."""

from .unit import MESH_NAME, PROBLEM_NAME, ObjectUnitTest

__all__ = ["MESH_NAME", "PROBLEM_NAME", "ObjectUnitTest"]
