"""DataKnobs Param package.

Coercion and validation of HTTP request parameters: raw query/form/JSON
values are converted to declared types, checked against declared options,
and written back typed into the request's parameter mapping.

Example:
    ```python
    from dataknobs_param import FailureMode, ParamProcessor, ParamSettings

    params = {"page": "2", "tags": "a,b"}
    processor = ParamProcessor(params, ParamSettings(failure_mode=FailureMode.ACCUMULATE))
    processor.param("page", int, min=1)
    processor.param("tags", list, max_length=5)
    params  # {"page": 2, "tags": ["a", "b"]}
    ```
"""

from .coercer import Coercer
from .cross_field import check_any_of, check_one_of, count_present
from .exceptions import (
    CoercionError,
    InvalidParameterError,
    ParameterHalt,
    ParamError,
    SettingsError,
)
from .options import is_blank, is_blank_value, is_present, normalize_options
from .param_types import ParamType
from .payload import ErrorPayload
from .processor import ParamProcessor, collect_failures, merge_failures
from .result import ValidationResult
from .settings import FailureMode, ParamSettings
from .validator import Validator

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Types
    "ParamType",
    # Coercion and validation
    "Coercer",
    "Validator",
    "ValidationResult",
    # Processing
    "ParamProcessor",
    "collect_failures",
    "merge_failures",
    "check_one_of",
    "check_any_of",
    "count_present",
    # Presence and options
    "is_blank",
    "is_blank_value",
    "is_present",
    "normalize_options",
    # Payloads
    "ErrorPayload",
    # Settings
    "FailureMode",
    "ParamSettings",
    # Exceptions
    "ParamError",
    "InvalidParameterError",
    "CoercionError",
    "ParameterHalt",
    "SettingsError",
]
