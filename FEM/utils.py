"""FEM utilities."""

from __future__ import annotations

from enum import Enum, StrEnum, auto

from basix import ElementFamily as BasixElementFamily


class ExecFlag(StrEnum):
    """Points of a simulation at which user objects can be executed."""

    INITIAL = auto()
    """Before the first time step."""
    TIMESTEP_BEGIN = auto()
    """At the beginning of every time step."""
    TIMESTEP_END = auto()
    """At the end of every time step."""
    FINAL = auto()
    """After the last time step."""
    CUSTOM = auto()
    """Only when explicitly requested."""

    @classmethod
    def from_string(cls, value: str) -> ExecFlag:
        """Get execution flag from a string."""
        try:
            return cls(value.lower().strip().replace(" ", "_"))
        except ValueError as e:
            raise ValueError(f"Invalid execution flag '{value}'. Valid flags: {[f.value for f in cls]}.") from e


class iElementFamily(Enum):
    """Internal element family identifiers for problem variables."""

    LAGRANGE = auto()
    """Continuous Lagrange element."""
    MONOMIAL = auto()
    """Discontinuous (element-wise) polynomial."""

    def to_basix(self) -> BasixElementFamily:
        """Convert to Basix ElementFamily enum."""
        return BasixElementFamily.P

    @property
    def discontinuous(self) -> bool:
        return self is iElementFamily.MONOMIAL

    @classmethod
    def from_string(cls, name: str) -> iElementFamily:
        """Create from string (case-insensitive)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown element family '{name}'. Valid options: {list(cls.__members__.keys())}"
            ) from None
