"""Core domain types and logic."""

from .config import Config, ConfigError, GateDefaults, load_config, load_workspace_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "Config",
    "ConfigError",
    "GateDefaults",
    "load_config",
    "load_workspace_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
