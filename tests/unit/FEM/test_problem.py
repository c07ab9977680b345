"""Unit tests for FEM.problem module."""

import pytest

from FEM import ExecFlag, FEProblem, GeneralUserObject, iElementFamily
from Meshing import GeneratedMesh
from Registry import Application

from conftest import CounterUserObject


@pytest.fixture
def problem(app: Application) -> FEProblem:
    mesh_params = app.factory.get_valid_params("GeneratedMesh")
    mesh_params.set("dim", "2")
    mesh_params.set("nx", 2)
    mesh_params.set("ny", 2)
    mesh = app.factory.create("GeneratedMesh", "mesh", mesh_params, GeneratedMesh)

    params = app.factory.get_valid_params("FEProblem")
    params.set("mesh", mesh)
    return app.factory.create("FEProblem", "problem", params, FEProblem)


def _add_counter(problem: FEProblem, name: str, *execute_on: str, increment: int = 1) -> CounterUserObject:
    params = problem.app.factory.get_valid_params("CounterUserObject")
    params.set("execute_on", execute_on)
    params.set("increment", increment)
    return problem.add_user_object("CounterUserObject", name, params)


def test_problem_requires_mesh(app: Application):
    with pytest.raises(ValueError, match="missing required parameter\\(s\\): mesh"):
        app.factory.create("FEProblem", "problem", app.factory.get_valid_params("FEProblem"))


def test_problem_rejects_non_mesh(app: Application):
    params = app.factory.get_valid_params("FEProblem")
    with pytest.raises(TypeError):
        params.set("mesh", "not a mesh")


def test_problem_defaults(problem: FEProblem):
    assert problem.solve
    assert problem.user_objects == []
    assert problem.variable_names == []
    assert not problem.mesh.is_initialized


def test_add_and_get_user_object(problem: FEProblem):
    uo = _add_counter(problem, "counter", "initial")

    assert problem.has_user_object("counter")
    assert problem.get_user_object("counter") is uo
    assert problem.get_user_object("counter", CounterUserObject) is uo
    assert uo.fe_problem is problem
    assert uo.execute_on == frozenset({ExecFlag.INITIAL})


def test_get_user_object_errors(problem: FEProblem):
    _add_counter(problem, "counter", "initial")

    with pytest.raises(KeyError):
        problem.get_user_object("missing")
    with pytest.raises(TypeError, match="not a GeneratedMesh"):
        problem.get_user_object("counter", GeneratedMesh)  # type: ignore[arg-type]


def test_duplicate_user_object(problem: FEProblem):
    _add_counter(problem, "counter", "initial")
    with pytest.raises(ValueError, match="already has a user object named 'counter'"):
        _add_counter(problem, "counter", "final")


def test_add_user_object_rejects_other_types(problem: FEProblem):
    params = problem.app.factory.get_valid_params("GeneratedMesh")
    with pytest.raises(TypeError, match="not UserObject"):
        problem.add_user_object("GeneratedMesh", "mesh2", params)


def test_invalid_execute_on(problem: FEProblem):
    with pytest.raises(ValueError, match="Invalid execution flag 'sometimes'"):
        _add_counter(problem, "counter", "sometimes")


def test_execute_runs_matching_user_objects_in_order(problem: FEProblem):
    first = _add_counter(problem, "first", "initial", "timestep_end")
    second = _add_counter(problem, "second", "timestep_end", increment=5)
    third = _add_counter(problem, "third", "final")

    problem.execute(ExecFlag.TIMESTEP_END)
    problem.execute("timestep_end")
    problem.execute(ExecFlag.INITIAL)

    assert first.value == 3
    assert second.value == 10
    assert third.value == 0
    assert first.calls[:3] == ["initialize", "execute", "finalize"]


def test_general_user_object_is_registered(problem: FEProblem):
    uo = problem.add_user_object(
        "GeneralUserObject", "noop", problem.app.factory.get_valid_params("GeneralUserObject")
    )
    assert isinstance(uo, GeneralUserObject)
    assert uo.execute_on == frozenset({ExecFlag.TIMESTEP_END})
    problem.execute(ExecFlag.TIMESTEP_END)


@pytest.mark.parametrize(
    "family, order, components, dofs",
    [
        (iElementFamily.LAGRANGE, 1, 1, 9),
        ("lagrange", 2, 1, 25),
        (iElementFamily.LAGRANGE, 1, 2, 18),
        ("monomial", 0, 1, 4),
    ],
)
def test_add_variable(problem: FEProblem, family: iElementFamily | str, order: int, components: int, dofs: int):
    """Variables initialize the mesh and build their function space on it."""
    space = problem.add_variable("u", family, order, components)

    assert problem.mesh.is_initialized
    assert space.mesh is problem.mesh.mesh
    assert problem.get_variable("u") is space
    assert problem.variable_names == ["u"]
    assert space.dofmap.index_map.size_global * space.dofmap.index_map_bs == dofs


def test_add_variable_errors(problem: FEProblem):
    problem.add_variable("u")
    with pytest.raises(ValueError, match="already has a variable named 'u'"):
        problem.add_variable("u")
    with pytest.raises(ValueError, match="Continuous variables require order >= 1"):
        problem.add_variable("v", iElementFamily.LAGRANGE, 0)
    with pytest.raises(ValueError, match="Unknown element family"):
        problem.add_variable("w", "hermite")
    with pytest.raises(KeyError):
        problem.get_variable("v")


def test_close(problem: FEProblem):
    _add_counter(problem, "counter", "initial")
    problem.close()

    assert problem.user_objects == []
    with pytest.raises(RuntimeError, match="has been closed"):
        _ = problem.mesh
