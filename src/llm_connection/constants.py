import re
from enum import StrEnum

from llm_connection.exceptions import UnsupportedProviderError

CONNECTION_SCHEME = "llm"

BOOLEAN_TRUE_VALUES = frozenset({"true", "1", "yes"})
BOOLEAN_LITERALS = ("true", "false", "0", "1")

# Duration expression for cache TTLs, e.g. "5m", "1h", "30m".
DURATION_RE = re.compile(r"^\d+[mh]$")


class Provider(StrEnum):
    """String enum for supported providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    MISTRAL = "mistral"
    COHERE = "cohere"
    BEDROCK = "bedrock"
    OPENROUTER = "openrouter"
    VERCEL = "vercel"

    @classmethod
    def from_string(cls, value: "str | Provider") -> "Provider":
        """Convert a string to a Provider enum."""
        if isinstance(value, cls):
            return value

        formatted_value = value.strip().lower()
        try:
            return cls(formatted_value)
        except ValueError as exc:
            supported = [provider.value for provider in cls]
            raise UnsupportedProviderError(value, supported) from exc


class BedrockModelFamily(StrEnum):
    """Model vendors hosted on Bedrock, read from the model id prefix."""

    ANTHROPIC = "anthropic"
    META = "meta"
    AMAZON = "amazon"
    MISTRAL = "mistral"
    COHERE = "cohere"
    AI21 = "ai21"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


DIRECT_PROVIDERS: tuple[Provider, ...] = (
    Provider.OPENAI,
    Provider.ANTHROPIC,
    Provider.GOOGLE,
    Provider.MISTRAL,
    Provider.COHERE,
)

GATEWAY_PROVIDERS: tuple[Provider, ...] = (Provider.OPENROUTER, Provider.VERCEL)

# Cross-region and global inference profile prefixes, e.g. "us.anthropic.claude-...".
BEDROCK_ROUTING_PREFIXES = frozenset({"us", "eu", "apac", "global"})
