"""Unit-test framework configuration."""

from pathlib import Path
from typing import Iterator

import pytest

from FEM.user_objects import GeneralUserObject
from Registry import AppFactory, Application, Factory, InputParameters, app_factory

TEST_APP: str = "TestApp"


class CounterUserObject(GeneralUserObject):
    """User object counting how often each hook runs."""

    @classmethod
    def valid_params(cls) -> InputParameters:
        params = super().valid_params()
        params.add_param("increment", int, 1, "Value added on every execution.")
        return params

    def __init__(self, params: InputParameters) -> None:
        super().__init__(params)
        self.increment: int = self.get_param("increment")
        self.value = 0
        self.calls: list[str] = []

    def initialize(self) -> None:
        self.calls.append("initialize")

    def execute(self) -> None:
        self.calls.append("execute")
        self.value += self.increment

    def finalize(self) -> None:
        self.calls.append("finalize")


class UnitTestApp(Application):
    """Application registering the test objects."""

    __test__ = False

    def register_objects(self, factory: Factory) -> None:
        super().register_objects(factory)
        factory.register(CounterUserObject)


@pytest.fixture
def apps() -> AppFactory:
    """Fresh application factory with the test application registered."""
    factory = AppFactory()
    factory.register(TEST_APP, UnitTestApp)
    return factory


@pytest.fixture
def app(apps: AppFactory) -> Application:
    return apps.create_app(TEST_APP)


@pytest.fixture
def default_test_app() -> Iterator[str]:
    """Register the test application in the framework application factory for the duration of a test."""
    app_factory.register(TEST_APP, UnitTestApp)
    yield TEST_APP
    app_factory.unregister(TEST_APP)


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    """Create a temporary TOML input file with a mesh, the default problem and two user objects."""
    path = tmp_path / "input.toml"
    path.write_text(
        """\
[Application]
type = "TestApp"

[Mesh]
type = "GeneratedMesh"
name = "box"
dim = 2
nx = 3
ny = 2
xmax = 2

[UserObjects.first]
type = "CounterUserObject"
execute_on = ["initial", "timestep_end"]

[UserObjects.second]
type = "CounterUserObject"
increment = 5
execute_on = "final"
"""
    )
    return path
