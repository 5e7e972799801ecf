from llm_connection.connection import build, parse
from llm_connection.constants import BedrockModelFamily, Provider, Severity
from llm_connection.exceptions import InvalidConnectionStringError, LLMConnectionError, UnsupportedProviderError
from llm_connection.normalize import normalize
from llm_connection.providers import (
    ALIASES,
    PARAM_SPECS,
    PROVIDER_PARAMS,
    ParamSpec,
    detect_bedrock_model_family,
    detect_gateway_sub_provider,
    detect_provider,
)
from llm_connection.types import (
    ConnectionRecord,
    NormalizeChange,
    NormalizeOptions,
    NormalizeResult,
    ValidateOptions,
    ValidationIssue,
)
from llm_connection.validate import has_errors, validate, validate_record

__version__ = "0.1.0"

__all__ = [
    "ALIASES",
    "PARAM_SPECS",
    "PROVIDER_PARAMS",
    "BedrockModelFamily",
    "ConnectionRecord",
    "InvalidConnectionStringError",
    "LLMConnectionError",
    "NormalizeChange",
    "NormalizeOptions",
    "NormalizeResult",
    "ParamSpec",
    "Provider",
    "Severity",
    "UnsupportedProviderError",
    "ValidateOptions",
    "ValidationIssue",
    "build",
    "detect_bedrock_model_family",
    "detect_gateway_sub_provider",
    "detect_provider",
    "has_errors",
    "normalize",
    "parse",
    "validate",
    "validate_record",
]
