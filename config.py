"""Framework configuration (TOML input files)."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomllib

_RESERVED_KEYS: frozenset[str] = frozenset({"type", "name"})


def read_toml(path: Path) -> dict[str, Any]:
    """Read TOML file."""
    if not path.exists():
        raise FileNotFoundError(f"TOML config file not found at '{path}'")
    with path.open("rb") as p:
        return tomllib.load(p)


@dataclass(frozen=True)
class ObjectBlockConfig:
    """Configured framework object (one input file block)."""

    type: str
    """Registered object type."""
    name: str
    """Object name."""
    params: dict[str, Any] = field(default_factory=dict)
    """Raw parameter values, keyed by parameter name."""


@dataclass(frozen=True)
class InputConfig:
    """Configured simulation: application, mesh, problem and user objects."""

    mesh: ObjectBlockConfig
    """Mesh block."""
    problem: ObjectBlockConfig
    """Problem block."""
    user_objects: tuple[ObjectBlockConfig, ...] = ()
    """User object blocks, in file order."""
    app: str | None = None
    """Registered application name, if given in the file."""
    app_args: tuple[str, ...] = ()
    """Command-line arguments for the application."""


def _parse_block(raw: Any, section: str, default_type: str | None, default_name: str) -> ObjectBlockConfig:
    if not isinstance(raw, dict):
        raise TypeError(f"Section '{section}' must be a table (dictionary).")
    obj_type = str(raw.get("type", default_type or "")).strip()
    if not obj_type:
        raise KeyError(f"Section '{section}' is missing required 'type'.")
    name = str(raw.get("name", default_name)).strip()
    if not name:
        raise ValueError(f"Section '{section}' has an empty 'name'.")
    params = {k: v for k, v in raw.items() if k not in _RESERVED_KEYS}
    return ObjectBlockConfig(type=obj_type, name=name, params=params)


def load_input_config(path: Path) -> InputConfig:
    """Load a simulation input file.

    The file must contain a ``[Mesh]`` table; ``[Problem]`` defaults to an ``FEProblem`` named ``problem``. User
    objects are sub-tables of ``[UserObjects]``, named after their key. Every key other than ``type`` and ``name`` is
    passed to the object as a parameter.

    Example
    -------
    ````toml
    [Application]
    type = "TestApp"

    [Mesh]
    type = "GeneratedMesh"
    dim = 3
    nx = 4

    [UserObjects.counter]
    type = "GeneralUserObject"
    execute_on = ["initial", "timestep_end"]
    ````
    """
    cfg = read_toml(path)

    if "Mesh" not in cfg:
        raise KeyError(f"Input file '{path}' is missing the [Mesh] section.")
    mesh = _parse_block(cfg["Mesh"], "Mesh", None, "mesh")
    problem = _parse_block(cfg.get("Problem", {}), "Problem", "FEProblem", "problem")

    raw_uos = cfg.get("UserObjects", {})
    if not isinstance(raw_uos, dict):
        raise TypeError("Section 'UserObjects' must be a table of tables.")
    user_objects = tuple(
        _parse_block(raw, f"UserObjects.{key}", None, key) for key, raw in raw_uos.items()
    )

    app_section = cfg.get("Application", {})
    if not isinstance(app_section, dict):
        raise TypeError("Section 'Application' must be a table (dictionary).")
    app_args = app_section.get("args", [])
    if not isinstance(app_args, list) or not all(isinstance(a, str) for a in app_args):
        raise TypeError("Application 'args' must be a list of strings.")

    return InputConfig(
        mesh=mesh,
        problem=problem,
        user_objects=user_objects,
        app=app_section.get("type"),
        app_args=tuple(app_args),
    )
