"""Core types shared by every layer."""

from .config import ProjectConfig, ConfigError, load_project_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ProjectConfig",
    "ConfigError",
    "load_project_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
