"""Unit tests for Meshing.core module."""

import numpy as np
import pytest

from Meshing import BOUNDARY_IDS, ElemType, GeneratedMesh, iCellType
from Registry import Factory, InputParameters


@pytest.fixture
def factory() -> Factory:
    f = Factory()
    f.register(GeneratedMesh)
    return f


def _params(factory: Factory, **values) -> InputParameters:
    params = factory.get_valid_params("GeneratedMesh")
    for key, value in values.items():
        params.set(key, value)
    return params


def test_cell_type_enum_mapping():
    """Ensure iCellType maps correctly to dolfinx CellType. Quick smoke test."""
    assert iCellType.TRIANGLE.to_dolfinx().name == "triangle"
    assert iCellType.HEXAHEDRON.to_dolfinx().value == iCellType.HEXAHEDRON.value
    assert ElemType.HEX8.cell_type is iCellType.HEXAHEDRON
    assert ElemType.TRI3.dim == 2


def test_defaults(factory: Factory):
    mesh = factory.create("GeneratedMesh", "m", _params(factory))

    assert mesh.dimension == 1
    assert mesh.elem_type is ElemType.EDGE2
    assert mesh.resolution == (1,)
    assert mesh.domain == ((0.0,), (1.0,))
    assert not mesh.is_initialized


def test_mesh_requires_init(factory: Factory):
    mesh = factory.create("GeneratedMesh", "m", _params(factory))
    with pytest.raises(RuntimeError, match="has not been initialized"):
        _ = mesh.mesh


@pytest.mark.parametrize(
    "values, expected_topo_dim, expected_cell_name, expected_cells",
    [
        ({"dim": "1", "nx": 8}, 1, "interval", 8),
        ({"dim": "2", "nx": 4, "ny": 3}, 2, "quadrilateral", 12),
        ({"dim": "2", "nx": 4, "ny": 3, "elem_type": "TRI3"}, 2, "triangle", 24),
        ({"dim": "3", "nx": 2, "ny": 2, "nz": 2}, 3, "hexahedron", 8),
        ({"dim": "3", "nx": 1, "ny": 1, "nz": 1, "elem_type": "TET4"}, 3, "tetrahedron", 6),
    ],
)
def test_generate_mesh(
    factory: Factory,
    values: dict,
    expected_topo_dim: int,
    expected_cell_name: str,
    expected_cells: int,
) -> None:
    """Test mesh generation for different dimension/element configurations (serial run)."""
    mesh = factory.create("GeneratedMesh", "m", _params(factory, **values))
    dmesh = mesh.init()

    assert mesh.is_initialized
    assert mesh.init() is dmesh
    assert dmesh.topology.dim == expected_topo_dim
    assert dmesh.topology.cell_name() == expected_cell_name
    assert mesh.n_cells() == expected_cells


def test_custom_domain_3d(factory: Factory) -> None:
    """Test mesh generation with a custom domain in 3D."""
    values = {"dim": "3", "nx": 2, "ny": 3, "nz": 4, "xmin": -1.0, "xmax": 1.0, "ymax": 5.0, "zmin": 2.0, "zmax": 3.0}
    mesh = factory.create("GeneratedMesh", "m", _params(factory, **values))
    coords = mesh.init().geometry.x

    assert mesh.domain == ((-1.0, 0.0, 2.0), (1.0, 5.0, 3.0))
    for dim, (min_expected, max_expected) in enumerate(zip(*mesh.domain)):
        assert np.isclose(coords[:, dim].min(), min_expected)
        assert np.isclose(coords[:, dim].max(), max_expected)


@pytest.mark.parametrize("dim, n", [("1", {"nx": 4}), ("2", {"nx": 2, "ny": 2}), ("3", {"nx": 2, "ny": 2, "nz": 2})])
def test_boundary_tags(factory: Factory, dim: str, n: dict) -> None:
    """Every named boundary is tagged, on facets lying on the matching plane."""
    mesh = factory.create("GeneratedMesh", "m", _params(factory, dim=dim, **n))
    dmesh = mesh.init()
    tags = mesh.facet_tags

    assert tags is not None
    assert tags.dim == dmesh.topology.dim - 1
    assert set(tags.values) == set(BOUNDARY_IDS[int(dim)].values())
    left = tags.find(mesh.get_boundary_id("left"))
    assert left.size > 0


def test_unknown_boundary(factory: Factory):
    mesh = factory.create("GeneratedMesh", "m", _params(factory, dim="2"))
    with pytest.raises(KeyError, match="Valid names are: bottom, right, top, left"):
        mesh.get_boundary_id("front")


@pytest.mark.parametrize(
    "values, match",
    [
        ({"dim": "2", "ny": 0}, "'ny' must be greater than zero"),
        ({"dim": "3", "zmin": 1.0, "zmax": 1.0}, "'zmin' must be smaller than 'zmax'"),
        ({"dim": "3", "elem_type": "QUAD4"}, "not a 3D element"),
    ],
)
def test_invalid_parameters(factory: Factory, values: dict, match: str):
    with pytest.raises(ValueError, match=match):
        factory.create("GeneratedMesh", "m", _params(factory, **values))


def test_unused_axes_are_not_validated(factory: Factory):
    """Parameters of directions above the mesh dimension are ignored."""
    mesh = factory.create("GeneratedMesh", "m", _params(factory, dim="1", nz=0))
    assert mesh.resolution == (1,)


def test_close_releases_dolfinx_mesh(factory: Factory):
    mesh = factory.create("GeneratedMesh", "m", _params(factory, dim="2"))
    mesh.init()
    mesh.close()

    assert not mesh.is_initialized
    assert mesh.facet_tags is None
