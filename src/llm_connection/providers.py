"""Table-driven provider registry.

Everything provider-specific lives in the tables below: host signatures,
shorthand aliases, canonical-to-native parameter names, validation specs
and cache directives. The normalizer and validator only read these
tables; treat every mapping here as read-only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from llm_connection.constants import (
    BEDROCK_ROUTING_PREFIXES,
    DIRECT_PROVIDERS,
    GATEWAY_PROVIDERS,
    BedrockModelFamily,
    Provider,
)


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """Validation rule for one native parameter of one provider."""

    type: Literal["number", "string", "boolean"]
    min: float | None = None
    max: float | None = None
    values: tuple[str, ...] | None = None
    default: str | float | bool | None = None
    description: str | None = None


# Checked in order; first match wins. Gateways come first, then Bedrock
# (its model ids, not its host, name other vendors), then native vendors.
_HOST_SIGNATURES: tuple[tuple[tuple[str, ...], Provider], ...] = (
    (("openrouter",), Provider.OPENROUTER),
    (("gateway.ai.vercel",), Provider.VERCEL),
    (("amazonaws", "bedrock"), Provider.BEDROCK),
    (("openai",), Provider.OPENAI),
    (("anthropic", "claude"), Provider.ANTHROPIC),
    (("googleapis", "google"), Provider.GOOGLE),
    (("mistral",), Provider.MISTRAL),
    (("cohere",), Provider.COHERE),
)

# Shorthand -> canonical name. Canonical names are snake_case and follow
# OpenAI conventions where possible.
ALIASES: dict[str, str] = {
    # temperature
    "temp": "temperature",
    # max_tokens
    "max": "max_tokens",
    "max_out": "max_tokens",
    "max_output": "max_tokens",
    "max_output_tokens": "max_tokens",
    "max_completion_tokens": "max_tokens",
    "maxOutputTokens": "max_tokens",
    "maxTokens": "max_tokens",
    # top_p
    "topp": "top_p",
    "topP": "top_p",
    "nucleus": "top_p",
    # top_k
    "topk": "top_k",
    "topK": "top_k",
    # frequency_penalty
    "freq": "frequency_penalty",
    "freq_penalty": "frequency_penalty",
    "frequencyPenalty": "frequency_penalty",
    "repetition_penalty": "frequency_penalty",
    # presence_penalty
    "pres": "presence_penalty",
    "pres_penalty": "presence_penalty",
    "presencePenalty": "presence_penalty",
    # stop
    "stop_sequences": "stop",
    "stopSequences": "stop",
    "stop_sequence": "stop",
    # seed
    "random_seed": "seed",
    "randomSeed": "seed",
    # n
    "candidateCount": "n",
    "candidate_count": "n",
    "num_completions": "n",
    # effort
    "reasoning_effort": "effort",
    "reasoning": "effort",
    # cache
    "cache_control": "cache",
    "cacheControl": "cache",
    "cachePoint": "cache",
    "cache_point": "cache",
}

_OPENAI_COMPATIBLE_PARAMS: dict[str, str] = {
    "temperature": "temperature",
    "max_tokens": "max_tokens",
    "top_p": "top_p",
    "top_k": "top_k",
    "frequency_penalty": "frequency_penalty",
    "presence_penalty": "presence_penalty",
    "stop": "stop",
    "n": "n",
    "seed": "seed",
    "stream": "stream",
    "effort": "reasoning_effort",
}

# Canonical name -> native name. Only parameters the provider accepts.
PROVIDER_PARAMS: dict[Provider, dict[str, str]] = {
    Provider.OPENAI: {
        "temperature": "temperature",
        "max_tokens": "max_tokens",
        "top_p": "top_p",
        "frequency_penalty": "frequency_penalty",
        "presence_penalty": "presence_penalty",
        "stop": "stop",
        "n": "n",
        "seed": "seed",
        "stream": "stream",
        "effort": "reasoning_effort",
    },
    Provider.ANTHROPIC: {
        "temperature": "temperature",
        "max_tokens": "max_tokens",
        "top_p": "top_p",
        "top_k": "top_k",
        "stop": "stop_sequences",
        "stream": "stream",
        "effort": "effort",
        "cache": "cache_control",
        "cache_ttl": "cache_ttl",
    },
    Provider.GOOGLE: {
        "temperature": "temperature",
        "max_tokens": "maxOutputTokens",
        "top_p": "topP",
        "top_k": "topK",
        "frequency_penalty": "frequencyPenalty",
        "presence_penalty": "presencePenalty",
        "stop": "stopSequences",
        "n": "candidateCount",
        "stream": "stream",
        "seed": "seed",
        "responseMimeType": "responseMimeType",
        "responseSchema": "responseSchema",
    },
    Provider.MISTRAL: {
        "temperature": "temperature",
        "max_tokens": "max_tokens",
        "top_p": "top_p",
        "frequency_penalty": "frequency_penalty",
        "presence_penalty": "presence_penalty",
        "stop": "stop",
        "n": "n",
        "seed": "random_seed",
        "stream": "stream",
        "safe_prompt": "safe_prompt",
        "min_tokens": "min_tokens",
    },
    Provider.COHERE: {
        "temperature": "temperature",
        "max_tokens": "max_tokens",
        "top_p": "p",
        "top_k": "k",
        "frequency_penalty": "frequency_penalty",
        "presence_penalty": "presence_penalty",
        "stop": "stop_sequences",
        "stream": "stream",
        "seed": "seed",
    },
    # Converse API, camelCase
    Provider.BEDROCK: {
        "temperature": "temperature",
        "max_tokens": "maxTokens",
        "top_p": "topP",
        "top_k": "topK",  # additionalModelRequestFields
        "stop": "stopSequences",
        "stream": "stream",
        "cache": "cache_control",
        "cache_ttl": "cache_ttl",
    },
    Provider.OPENROUTER: dict(_OPENAI_COMPATIBLE_PARAMS),
    Provider.VERCEL: dict(_OPENAI_COMPATIBLE_PARAMS),
}

_TEMPERATURE_0_2 = ParamSpec("number", min=0, max=2, default=0.7, description="Controls randomness")
_TEMPERATURE_0_1 = ParamSpec("number", min=0, max=1, default=0.7, description="Controls randomness")
_MAX_TOKENS = ParamSpec("number", min=1, default=4096, description="Maximum output tokens")
_MAX_COMPLETION_TOKENS = ParamSpec(
    "number", min=1, default=4096, description="Maximum output tokens (reasoning models)"
)
_TOP_P = ParamSpec("number", min=0, max=1, default=1, description="Nucleus sampling")
_TOP_K = ParamSpec("number", min=0, default=40, description="Top-K sampling")
_FREQUENCY_PENALTY = ParamSpec("number", min=-2, max=2, default=0, description="Penalize frequent tokens")
_PRESENCE_PENALTY = ParamSpec("number", min=-2, max=2, default=0, description="Penalize repeated topics")
_STOP = ParamSpec("string", description="Stop sequences")
_N = ParamSpec("number", min=1, default=1, description="Completions count")
_SEED = ParamSpec("number", description="Random seed")
_STREAM = ParamSpec("boolean", default=False, description="Stream response")
_REASONING_EFFORT = ParamSpec(
    "string",
    values=("none", "minimal", "low", "medium", "high", "xhigh"),
    default="medium",
    description="Reasoning effort",
)
_CACHE_CONTROL = ParamSpec("string", values=("ephemeral",), default="ephemeral", description="Cache control")
_CACHE_TTL = ParamSpec("string", values=("5m", "1h"), default="5m", description="Cache TTL")

# Loose ranges: gateways proxy to many providers.
_GATEWAY_SPECS: dict[str, ParamSpec] = {
    "temperature": _TEMPERATURE_0_2,
    "max_tokens": _MAX_TOKENS,
    "max_completion_tokens": _MAX_COMPLETION_TOKENS,
    "top_p": _TOP_P,
    "top_k": _TOP_K,
    "frequency_penalty": _FREQUENCY_PENALTY,
    "presence_penalty": _PRESENCE_PENALTY,
    "stop": _STOP,
    "n": _N,
    "seed": _SEED,
    "stream": _STREAM,
    "reasoning_effort": _REASONING_EFFORT,
}

# Native name -> spec.
PARAM_SPECS: dict[Provider, dict[str, ParamSpec]] = {
    Provider.OPENAI: {
        "temperature": _TEMPERATURE_0_2,
        "max_tokens": _MAX_TOKENS,
        "max_completion_tokens": _MAX_COMPLETION_TOKENS,
        "top_p": _TOP_P,
        "frequency_penalty": _FREQUENCY_PENALTY,
        "presence_penalty": _PRESENCE_PENALTY,
        "stop": _STOP,
        "n": _N,
        "seed": _SEED,
        "stream": _STREAM,
        "reasoning_effort": _REASONING_EFFORT,
    },
    Provider.ANTHROPIC: {
        "temperature": _TEMPERATURE_0_1,
        "max_tokens": _MAX_TOKENS,
        "top_p": _TOP_P,
        "top_k": _TOP_K,
        "stop_sequences": _STOP,
        "stream": _STREAM,
        "effort": ParamSpec(
            "string", values=("low", "medium", "high", "max"), default="medium", description="Thinking effort"
        ),
        "cache_control": _CACHE_CONTROL,
        "cache_ttl": _CACHE_TTL,
    },
    Provider.GOOGLE: {
        "temperature": _TEMPERATURE_0_2,
        "maxOutputTokens": _MAX_TOKENS,
        "topP": _TOP_P,
        "topK": _TOP_K,
        "frequencyPenalty": _FREQUENCY_PENALTY,
        "presencePenalty": _PRESENCE_PENALTY,
        "stopSequences": _STOP,
        "candidateCount": ParamSpec("number", min=1, default=1, description="Candidate count"),
        "stream": _STREAM,
        "seed": _SEED,
        "responseMimeType": ParamSpec("string", description="Response MIME type"),
        "responseSchema": ParamSpec("string", description="Response schema"),
    },
    Provider.MISTRAL: {
        "temperature": _TEMPERATURE_0_1,
        "max_tokens": _MAX_TOKENS,
        "top_p": _TOP_P,
        "frequency_penalty": _FREQUENCY_PENALTY,
        "presence_penalty": _PRESENCE_PENALTY,
        "stop": _STOP,
        "n": _N,
        "random_seed": _SEED,
        "stream": _STREAM,
        "safe_prompt": ParamSpec("boolean", default=False, description="Enable safe prompt"),
        "min_tokens": ParamSpec("number", min=0, default=0, description="Minimum tokens"),
    },
    Provider.COHERE: {
        "temperature": _TEMPERATURE_0_1,
        "max_tokens": _MAX_TOKENS,
        "p": ParamSpec("number", min=0, max=1, default=1, description="Nucleus sampling (p)"),
        "k": ParamSpec("number", min=0, max=500, default=40, description="Top-K sampling (k)"),
        "frequency_penalty": ParamSpec("number", min=0, max=1, default=0, description="Penalize frequent tokens"),
        "presence_penalty": ParamSpec("number", min=0, max=1, default=0, description="Penalize repeated topics"),
        "stop_sequences": _STOP,
        "stream": _STREAM,
        "seed": _SEED,
    },
    Provider.BEDROCK: {
        "temperature": _TEMPERATURE_0_1,
        "maxTokens": _MAX_TOKENS,
        "topP": _TOP_P,
        "topK": _TOP_K,
        "stopSequences": _STOP,
        "stream": _STREAM,
        "cache_control": _CACHE_CONTROL,
        "cache_ttl": _CACHE_TTL,
    },
    Provider.OPENROUTER: dict(_GATEWAY_SPECS),
    Provider.VERCEL: dict(_GATEWAY_SPECS),
}

# Sampling controls OpenAI reasoning models reject.
REASONING_MODEL_UNSUPPORTED: frozenset[str] = frozenset(
    {"temperature", "top_p", "frequency_penalty", "presence_penalty", "n"}
)

REASONING_MAX_TOKENS_PARAM = "max_completion_tokens"

# Value written for cache=true. None: no explicit cache param (OpenAI
# caches automatically, Google uses a separate caching API, gateways
# depend on the upstream provider).
CACHE_VALUES: dict[Provider, str | None] = {
    Provider.OPENAI: None,
    Provider.ANTHROPIC: "ephemeral",
    Provider.GOOGLE: None,
    Provider.MISTRAL: None,
    Provider.COHERE: None,
    Provider.BEDROCK: "ephemeral",
    Provider.OPENROUTER: None,
    Provider.VERCEL: None,
}

CACHE_TTLS: dict[Provider, tuple[str, ...] | None] = {
    Provider.OPENAI: None,
    Provider.ANTHROPIC: ("5m", "1h"),
    Provider.GOOGLE: None,
    Provider.MISTRAL: None,
    Provider.COHERE: None,
    Provider.BEDROCK: ("5m", "1h"),
    Provider.OPENROUTER: None,
    Provider.VERCEL: None,
}

_REASONING_MODEL_RE = re.compile(r"^o[134]")

_BEDROCK_TOP_K_FAMILIES = frozenset(
    {BedrockModelFamily.ANTHROPIC, BedrockModelFamily.COHERE, BedrockModelFamily.MISTRAL}
)


def detect_provider(host: str) -> Provider | None:
    """Match a host against the provider signatures, or None if unrecognized."""
    for signatures, provider in _HOST_SIGNATURES:
        if any(signature in host for signature in signatures):
            return provider
    return None


def detect_gateway_sub_provider(model: str) -> Provider | None:
    """Resolve the upstream vendor from a gateway model id.

    "anthropic/claude-sonnet-4-5" -> Provider.ANTHROPIC. Models without a
    "/" and unknown prefixes (qwen, deepseek, ...) give None.
    """
    prefix, sep, _ = model.partition("/")
    if not sep or not prefix:
        return None
    for provider in DIRECT_PROVIDERS:
        if provider.value == prefix:
            return provider
    return None


def detect_bedrock_model_family(model: str) -> BedrockModelFamily | None:
    """Read the vendor family from a Bedrock model id.

    Handles cross-region and global inference profiles such as
    "us.anthropic.claude-sonnet-4-5-20250929-v1:0".
    """
    parts = model.split(".")
    prefix = parts[0]
    if prefix in BEDROCK_ROUTING_PREFIXES and len(parts) > 1:
        prefix = parts[1]
    for family in BedrockModelFamily:
        if family.value == prefix:
            return family
    return None


def bedrock_supports_caching(model: str) -> bool:
    """Prompt caching on Bedrock is limited to Claude and Nova models."""
    family = detect_bedrock_model_family(model)
    if family == BedrockModelFamily.ANTHROPIC:
        return True
    return family == BedrockModelFamily.AMAZON and "nova" in model.lower()


def bedrock_supports_top_k(family: BedrockModelFamily) -> bool:
    return family in _BEDROCK_TOP_K_FAMILIES


def is_reasoning_model(model: str) -> bool:
    """Whether the model is an OpenAI reasoning model (o1, o3, o4 series)."""
    bare = model.rsplit("/", maxsplit=1)[-1] if "/" in model else model
    return _REASONING_MODEL_RE.match(bare) is not None


def can_host_openai_models(provider: Provider) -> bool:
    """Providers that can route to OpenAI models, directly or as a gateway."""
    return provider == Provider.OPENAI or is_gateway_provider(provider)


def is_gateway_provider(provider: Provider) -> bool:
    return provider in GATEWAY_PROVIDERS


def supports_explicit_caching(provider: Provider, model: str) -> bool:
    """Whether a cache directive can be sent for this provider/model pair."""
    if CACHE_VALUES.get(provider) is None:
        return False
    if provider == Provider.BEDROCK:
        return bedrock_supports_caching(model)
    return True


def provider_param_name(provider: Provider, canonical: str) -> str | None:
    return PROVIDER_PARAMS.get(provider, {}).get(canonical)


def canonical_param_name(provider: Provider, native: str) -> str | None:
    """Reverse lookup: native name -> canonical name for a provider."""
    for canonical, specific in PROVIDER_PARAMS.get(provider, {}).items():
        if specific == native:
            return canonical
    return None


def param_spec(provider: Provider, native: str) -> ParamSpec | None:
    return PARAM_SPECS.get(provider, {}).get(native)
