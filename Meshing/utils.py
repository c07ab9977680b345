"""Utilities for framework meshes."""

from __future__ import annotations

from enum import Enum, StrEnum

from basix import CellType as BasixCellType
from dolfinx.mesh import CellType as DolfinxCellType


class iCellType(Enum):
    """Internal cell type.

    Wraps the dolfinx CellType (an IntEnum) so that framework code and parameter dumps can refer to cells by name.
    """

    POINT = 1
    INTERVAL = 2
    TRIANGLE = 3
    QUADRILATERAL = -4
    TETRAHEDRON = 4
    HEXAHEDRON = -8

    def to_dolfinx(self) -> DolfinxCellType:
        """Convert internal type to dolfinx CellType."""
        return DolfinxCellType(self.value)

    def to_basix(self) -> BasixCellType:
        """Convert internal type to basix CellType."""
        return BasixCellType[self.to_dolfinx().name.lower()]

    @classmethod
    def from_dolfinx(cls, cell_type: DolfinxCellType) -> iCellType:
        """Create internal type from a dolfinx CellType."""
        return cls(cell_type.value)


class ElemType(StrEnum):
    """Element types accepted by generated meshes."""

    EDGE2 = "EDGE2"
    """Two-node line segment."""
    TRI3 = "TRI3"
    """Three-node triangle."""
    QUAD4 = "QUAD4"
    """Four-node quadrilateral."""
    TET4 = "TET4"
    """Four-node tetrahedron."""
    HEX8 = "HEX8"
    """Eight-node hexahedron."""

    @property
    def cell_type(self) -> iCellType:
        return _CELL_TYPES[self]

    @property
    def dim(self) -> int:
        """Topological dimension of the element."""
        return _DIMS[self.cell_type]

    @classmethod
    def default_for(cls, dim: int) -> ElemType:
        """Default element type of a generated mesh of dimension `dim`."""
        try:
            return _DEFAULTS[dim]
        except KeyError:
            raise ValueError(f"No default element type for dimension {dim}.") from None

    @classmethod
    def from_string(cls, value: str) -> ElemType:
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Invalid element type: {value}. Choose from {[e.value for e in cls]}.") from None


_CELL_TYPES: dict[ElemType, iCellType] = {
    ElemType.EDGE2: iCellType.INTERVAL,
    ElemType.TRI3: iCellType.TRIANGLE,
    ElemType.QUAD4: iCellType.QUADRILATERAL,
    ElemType.TET4: iCellType.TETRAHEDRON,
    ElemType.HEX8: iCellType.HEXAHEDRON,
}

_DIMS: dict[iCellType, int] = {
    iCellType.POINT: 0,
    iCellType.INTERVAL: 1,
    iCellType.TRIANGLE: 2,
    iCellType.QUADRILATERAL: 2,
    iCellType.TETRAHEDRON: 3,
    iCellType.HEXAHEDRON: 3,
}

_DEFAULTS: dict[int, ElemType] = {1: ElemType.EDGE2, 2: ElemType.QUAD4, 3: ElemType.HEX8}

BOUNDARY_IDS: dict[int, dict[str, int]] = {
    1: {"left": 0, "right": 1},
    2: {"bottom": 0, "right": 1, "top": 2, "left": 3},
    3: {"back": 0, "bottom": 1, "right": 2, "top": 3, "left": 4, "front": 5},
}
"""Boundary names and ids of generated meshes, per dimension."""
