"""Initialize framework meshes."""

from .core import GeneratedMesh, MeshBase
from .utils import BOUNDARY_IDS, ElemType, iCellType

__all__ = [
    "MeshBase",
    "ElemType",
    "iCellType",
    "BOUNDARY_IDS",
    "GeneratedMesh",
]
