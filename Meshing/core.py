"""Framework mesh objects.

Mesh objects are framework objects (built from parameters) that own a dolfinx mesh. The dolfinx mesh is only created
when `init()` is called, so that a mesh object can be set up, inspected and handed to a problem without paying for the
discretization.
"""

from __future__ import annotations

import logging

import dolfinx.mesh as dmesh
import numpy as np
from dolfinx.mesh import MeshTags, locate_entities_boundary, meshtags
from mpi4py import MPI

from lib.loggingutils import log_global
from Registry.objects import FrameworkObject
from Registry.parameters import InputParameters, ParamEnum

from .utils import BOUNDARY_IDS, ElemType, iCellType

logger = logging.getLogger(__name__)

_COMM: MPI.Intracomm = MPI.COMM_WORLD
_AXES: tuple[str, ...] = ("x", "y", "z")


class MeshBase(FrameworkObject):
    """Base class of mesh objects."""

    @classmethod
    def valid_params(cls) -> InputParameters:
        params = super().valid_params()
        params.add_param("dim", ParamEnum, ParamEnum("1 2 3", "1"), "Spatial dimension of the mesh.")
        return params

    def __init__(self, params: InputParameters) -> None:
        super().__init__(params)
        self._dim = int(self.get_param("dim"))
        self._mesh: dmesh.Mesh | None = None
        self._facet_tags: MeshTags | None = None

    @property
    def dimension(self) -> int:
        """Spatial dimension."""
        return self._dim

    @property
    def mesh(self) -> dmesh.Mesh:
        """Get the dolfinx mesh."""
        if self._mesh is None:
            raise RuntimeError(f"Mesh '{self.name}' has not been initialized.")
        return self._mesh

    @property
    def facet_tags(self) -> MeshTags | None:
        """Boundary facet tags (available after `init()`)."""
        return self._facet_tags

    @property
    def is_initialized(self) -> bool:
        return self._mesh is not None

    def init(self, comm: MPI.Intracomm = _COMM) -> dmesh.Mesh:
        """Build the dolfinx mesh. Calling it again returns the existing mesh."""
        if self._mesh is None:
            self._mesh = self._build(comm)
            log_global(
                logger,
                logging.INFO,
                "Mesh '%s' initialized with %d local cells.",
                self.name,
                self.n_cells(),
            )
        return self._mesh

    def n_cells(self) -> int:
        """Number of locally owned cells."""
        tdim = self.mesh.topology.dim
        return self.mesh.topology.index_map(tdim).size_local

    def close(self) -> None:
        """Release the dolfinx mesh."""
        self._facet_tags = None
        self._mesh = None

    def _build(self, comm: MPI.Intracomm) -> dmesh.Mesh:
        raise NotImplementedError(f"{type(self).__name__} does not implement mesh construction.")


class GeneratedMesh(MeshBase):
    """Structured line, rectangle or box mesh.

    Boundary facets are tagged following the generated-mesh naming convention (see `Meshing.utils.BOUNDARY_IDS`), e.g.
    for 3D meshes: back=0, bottom=1, right=2, top=3, left=4, front=5.
    """

    @classmethod
    def valid_params(cls) -> InputParameters:
        params = super().valid_params()
        for axis in _AXES:
            params.add_param(f"n{axis}", int, 1, f"Number of elements in the {axis} direction.")
            params.add_param(f"{axis}min", float, 0.0, f"Lower {axis} coordinate.")
            params.add_param(f"{axis}max", float, 1.0, f"Upper {axis} coordinate.")
        params.add_param(
            "elem_type",
            ParamEnum,
            ParamEnum([e.value for e in ElemType]),
            "Element type. Defaults to EDGE2, QUAD4 or HEX8 depending on the dimension.",
        )
        return params

    def validate_params(self, params: InputParameters) -> None:
        dim = int(params.get("dim"))
        for axis in _AXES[:dim]:
            if params.get(f"n{axis}") < 1:
                raise ValueError(f"{self._label(params)}: 'n{axis}' must be greater than zero.")
            if params.get(f"{axis}min") >= params.get(f"{axis}max"):
                raise ValueError(f"{self._label(params)}: '{axis}min' must be smaller than '{axis}max'.")

        elem = params.parameter("elem_type").value
        if elem.is_valid and ElemType.from_string(str(elem)).dim != dim:
            raise ValueError(f"{self._label(params)}: element type {elem} is not a {dim}D element.")

    @staticmethod
    def _label(params: InputParameters) -> str:
        return f"GeneratedMesh '{params.get('_object_name')}'"

    def __init__(self, params: InputParameters) -> None:
        super().__init__(params)
        axes = _AXES[: self._dim]
        self._n: tuple[int, ...] = tuple(self.get_param(f"n{a}") for a in axes)
        self._domain: tuple[tuple[float, ...], tuple[float, ...]] = (
            tuple(self.get_param(f"{a}min") for a in axes),
            tuple(self.get_param(f"{a}max") for a in axes),
        )
        elem = self.params.parameter("elem_type").value
        self._elem_type = ElemType.from_string(str(elem)) if elem.is_valid else ElemType.default_for(self._dim)

    def __repr__(self) -> str:
        return (
            f"GeneratedMesh(name={self.name!r}, dim={self._dim}, n={self._n}, "
            f"elem_type={self._elem_type}, domain={self._domain})"
        )

    @property
    def resolution(self) -> tuple[int, ...]:
        """Number of elements per direction."""
        return self._n

    @property
    def domain(self) -> tuple[tuple[float, ...], tuple[float, ...]]:
        """Lower and upper corners of the domain."""
        return self._domain

    @property
    def elem_type(self) -> ElemType:
        return self._elem_type

    @property
    def cell_type(self) -> iCellType:
        return self._elem_type.cell_type

    def get_boundary_id(self, name: str) -> int:
        """Get the facet tag of a named boundary (e.g., 'left')."""
        try:
            return BOUNDARY_IDS[self._dim][name]
        except KeyError:
            raise KeyError(
                f"Unknown boundary '{name}' for a {self._dim}D mesh. "
                f"Valid names are: {', '.join(BOUNDARY_IDS[self._dim])}."
            ) from None

    def _build(self, comm: MPI.Intracomm) -> dmesh.Mesh:
        lower, upper = self._domain
        match self._dim:
            case 1:
                mesh = dmesh.create_interval(comm, self._n[0], [lower[0], upper[0]])
            case 2:
                mesh = dmesh.create_rectangle(
                    comm, [list(lower), list(upper)], list(self._n), self.cell_type.to_dolfinx()
                )
            case 3:
                mesh = dmesh.create_box(comm, [list(lower), list(upper)], list(self._n), self.cell_type.to_dolfinx())
            case _:
                raise ValueError(f"Unsupported mesh dimension: {self._dim}.")

        self._facet_tags = self._tag_boundaries(mesh)
        return mesh

    def _tag_boundaries(self, mesh: dmesh.Mesh) -> MeshTags:
        tdim = mesh.topology.dim
        fdim = tdim - 1
        mesh.topology.create_connectivity(fdim, tdim)

        lower, upper = self._domain
        entities: list[np.ndarray] = []
        values: list[np.ndarray] = []
        for side, tag in BOUNDARY_IDS[self._dim].items():
            axis, value = self._side_plane(side, lower, upper)
            facets = locate_entities_boundary(mesh, fdim, lambda x, a=axis, v=value: np.isclose(x[a], v))
            entities.append(facets)
            values.append(np.full(facets.shape, tag, dtype=np.int32))

        all_entities = np.concatenate(entities).astype(np.int32)
        all_values = np.concatenate(values)
        order = np.argsort(all_entities)
        tags = meshtags(mesh, fdim, all_entities[order], all_values[order])
        tags.name = "facet_tags"
        return tags

    @staticmethod
    def _side_plane(side: str, lower: tuple[float, ...], upper: tuple[float, ...]) -> tuple[int, float]:
        match side:
            case "left":
                return 0, lower[0]
            case "right":
                return 0, upper[0]
            case "bottom":
                return 1, lower[1]
            case "top":
                return 1, upper[1]
            case "back":
                return 2, lower[2]
            case "front":
                return 2, upper[2]
            case _:
                raise ValueError(f"Unknown boundary: {side}.")
