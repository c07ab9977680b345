"""Framework input parameters.

A parameter set is a string-keyed bag of declared options. Every option is declared with the type it accepts, so that
assignments are type checked at the moment they happen rather than when the owning object reads them back.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence


class _Unset:
    """Sentinel for parameters without a value."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


class ParamEnum:
    """String enumeration parameter value.

    The set of valid choices is fixed at declaration time, while the current value can be reassigned from strings or
    integers (e.g., `dim = 3` or `dim = "3"`).
    """

    def __init__(self, choices: str | Sequence[str], default: str | int | None = None) -> None:
        names = choices.split() if isinstance(choices, str) else [str(c) for c in choices]
        if not names:
            raise ValueError("A ParamEnum requires at least one choice.")
        if len({n.upper() for n in names}) != len(names):
            raise ValueError(f"Duplicate choices in ParamEnum: {names}.")
        self._choices: tuple[str, ...] = tuple(names)
        self._value: str | None = None
        if default is not None:
            self.assign(default)

    @property
    def choices(self) -> tuple[str, ...]:
        """Valid choices."""
        return self._choices

    @property
    def is_valid(self) -> bool:
        """Whether a choice has been assigned."""
        return self._value is not None

    def assign(self, value: str | int | ParamEnum) -> None:
        """Assign a new value, which must be one of the choices (case insensitive)."""
        raw = str(value).strip()
        for choice in self._choices:
            if choice.upper() == raw.upper():
                self._value = choice
                return
        raise ValueError(f"Invalid option '{raw}'. Valid options are: {', '.join(self._choices)}.")

    def __str__(self) -> str:
        return self._value or ""

    def __int__(self) -> int:
        if self._value is None:
            raise ValueError("ParamEnum has no value assigned.")
        return int(self._value)

    def __repr__(self) -> str:
        return f"ParamEnum(choices={' '.join(self._choices)!r}, value={self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ParamEnum):
            return self._value == other._value and self._choices == other._choices
        if isinstance(other, (str, int)) and self._value is not None:
            return self._value.upper() == str(other).strip().upper()
        return NotImplemented

    # Mutable and equal to strings case-insensitively.
    __hash__ = None  # type: ignore[assignment]


@dataclass
class Parameter:
    """A single declared parameter."""

    name: str
    """Parameter name (key in the parameter set)."""
    type: type | tuple[type, ...]
    """Accepted type(s)."""
    value: Any = UNSET
    """Current value."""
    doc: str = ""
    """Documentation string."""
    required: bool = False
    """Whether a value must be provided before the owning object is built."""
    private: bool = False
    """Private parameters are set by the framework and hidden from dumps and input files."""
    set_by_user: bool = field(default=False, compare=False)
    """Whether the value was assigned after declaration."""

    @property
    def type_name(self) -> str:
        types = self.type if isinstance(self.type, tuple) else (self.type,)
        return " | ".join(t.__name__ for t in types)

    @property
    def is_valid(self) -> bool:
        if isinstance(self.value, ParamEnum):
            return self.value.is_valid
        return self.value is not UNSET


def _accepts(expected: type | tuple[type, ...], value: Any) -> bool:
    types = expected if isinstance(expected, tuple) else (expected,)
    if isinstance(value, bool):
        return bool in types or object in types
    if isinstance(value, int) and float in types:
        return True
    return isinstance(value, types)


class InputParameters:
    """Typed, string-keyed parameter set."""

    def __init__(self) -> None:
        self._params: dict[str, Parameter] = {}

    def __repr__(self) -> str:
        return f"InputParameters({', '.join(self._params)})"

    # Declaration ---

    def add_param(self, name: str, type_: type | tuple[type, ...], default: Any = UNSET, doc: str = "") -> None:
        """Declare an optional parameter, with an optional default value."""
        self._declare(Parameter(name=name, type=type_, doc=doc))
        if default is not UNSET:
            self._assign(self._params[name], default)

    def add_required_param(self, name: str, type_: type | tuple[type, ...], doc: str = "") -> None:
        """Declare a parameter that must be set before the owning object is constructed."""
        self._declare(Parameter(name=name, type=type_, doc=doc, required=True))

    def add_private_param(self, name: str, type_: type | tuple[type, ...], default: Any = UNSET) -> None:
        """Declare a framework-managed parameter."""
        self._declare(Parameter(name=name, type=type_, private=True))
        if default is not UNSET:
            self._assign(self._params[name], default)

    def _declare(self, param: Parameter) -> None:
        if not param.name:
            raise ValueError("Parameter names must be non-empty.")
        if param.name in self._params:
            raise ValueError(f"Parameter '{param.name}' is already declared.")
        self._params[param.name] = param

    # Assignment ---

    def set(self, name: str, value: Any) -> None:
        """Assign a value to a declared parameter, checking its type."""
        param = self._lookup(name)
        self._assign(param, value)
        param.set_by_user = True

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def set_default(self, name: str, value: Any) -> None:
        """Assign a framework-provided value, without marking the parameter as set by the user."""
        self._assign(self._lookup(name), value)

    def set_from_input(self, name: str, raw: Any) -> None:
        """Assign a value parsed from an input file.

        Input files only know about basic types, so lists are converted to tuples and single values destined for a
        tuple-typed parameter are wrapped.
        """
        param = self._lookup(name)
        if param.private:
            raise KeyError(f"Parameter '{name}' is private and cannot be set from an input file.")
        types = param.type if isinstance(param.type, tuple) else (param.type,)
        if isinstance(raw, list):
            raw = tuple(raw)
        elif tuple in types and not isinstance(raw, tuple):
            raw = (raw,)
        self.set(name, raw)

    def _assign(self, param: Parameter, value: Any) -> None:
        if isinstance(param.value, ParamEnum) and not isinstance(value, ParamEnum):
            if isinstance(value, bool) or not isinstance(value, (str, int)):
                raise TypeError(
                    f"Parameter '{param.name}' expects one of {param.value.choices}, got {type(value).__name__}."
                )
            param.value.assign(value)
            return

        types = param.type if isinstance(param.type, tuple) else (param.type,)
        if isinstance(value, list) and tuple in types:
            value = tuple(value)
        if not _accepts(param.type, value):
            raise TypeError(f"Parameter '{param.name}' expects {param.type_name}, got {type(value).__name__}.")
        if isinstance(value, ParamEnum):
            value = copy.deepcopy(value)
        elif isinstance(value, int) and not isinstance(value, bool) and not _accepts_int(param.type):
            value = float(value)
        param.value = value

    # Access ---

    def get(self, name: str) -> Any:
        """Get the value of a parameter."""
        param = self._lookup(name)
        if not param.is_valid:
            raise ValueError(f"Parameter '{name}' has not been set.")
        return param.value

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def get_as(self, name: str, type_: type) -> Any:
        """Get the value of a parameter, checking that it is an instance of `type_`."""
        value = self.get(name)
        if not isinstance(value, type_):
            raise TypeError(f"Parameter '{name}' holds {type(value).__name__}, not {type_.__name__}.")
        return value

    def parameter(self, name: str) -> Parameter:
        """Get the declaration of a parameter."""
        return self._lookup(name)

    def is_param_valid(self, name: str) -> bool:
        """Whether the parameter is declared and has a value."""
        return name in self._params and self._params[name].is_valid

    def is_param_set_by_user(self, name: str) -> bool:
        return name in self._params and self._params[name].set_by_user

    def is_private(self, name: str) -> bool:
        return self._lookup(name).private

    def public_items(self) -> Iterator[tuple[str, Parameter]]:
        """Iterate over non-private parameter declarations."""
        return ((k, p) for k, p in self._params.items() if not p.private)

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def _lookup(self, name: str) -> Parameter:
        try:
            return self._params[name]
        except KeyError as e:
            raise KeyError(f"Parameter '{name}' is not declared.") from e

    # Validation ---

    def check_params(self, object_name: str) -> None:
        """Check that every required parameter has been given a value."""
        missing = [n for n, p in self._params.items() if p.required and not p.is_valid]
        if missing:
            raise ValueError(f"{object_name}: missing required parameter(s): {', '.join(missing)}.")

    def copy(self) -> InputParameters:
        """Copy the parameter set.

        Values are copied deeply, except for references to framework objects (e.g., meshes), which are shared.
        """
        new = InputParameters()
        for name, param in self._params.items():
            value = param.value
            if isinstance(value, (ParamEnum, list, dict, set)):
                value = copy.deepcopy(value)
            new._params[name] = Parameter(
                name=param.name,
                type=param.type,
                value=value,
                doc=param.doc,
                required=param.required,
                private=param.private,
                set_by_user=param.set_by_user,
            )
        return new


def _accepts_int(expected: type | tuple[type, ...]) -> bool:
    types = expected if isinstance(expected, tuple) else (expected,)
    return int in types or object in types
