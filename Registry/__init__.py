"""Initialize the framework object registry."""

from .app import AppFactory, Application, app_factory
from .factory import Factory
from .objects import FrameworkObject
from .parameters import UNSET, InputParameters, Parameter, ParamEnum

__all__ = [
    "UNSET",
    "Factory",
    "ParamEnum",
    "Parameter",
    "AppFactory",
    "Application",
    "app_factory",
    "FrameworkObject",
    "InputParameters",
]
