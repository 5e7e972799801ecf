"""Check normalized connection params against provider specs."""

from __future__ import annotations

import math

from llm_connection.connection import parse
from llm_connection.constants import BOOLEAN_LITERALS, BedrockModelFamily, Provider, Severity
from llm_connection.log_config import logger
from llm_connection.normalize import normalize
from llm_connection.providers import (
    PARAM_SPECS,
    PROVIDER_PARAMS,
    REASONING_MODEL_UNSUPPORTED,
    ParamSpec,
    bedrock_supports_caching,
    bedrock_supports_top_k,
    can_host_openai_models,
    canonical_param_name,
    detect_bedrock_model_family,
    is_reasoning_model,
    param_spec,
    provider_param_name,
)
from llm_connection.types import ConnectionRecord, ValidateOptions, ValidationIssue


def validate(
    connection_string: str,
    options: ValidateOptions | None = None,
    *,
    strict: bool | None = None,
) -> list[ValidationIssue]:
    """Validate an LLM connection string.

    Parses and normalizes the string, then checks every param against the
    provider's specs. Through a gateway (OpenRouter, Vercel) the model
    prefix selects the upstream provider whose rules apply; unknown
    prefixes fall back to the gateway's loose specs.

    Args:
        connection_string: Raw ``llm://`` connection string.
        options: Validation options.
        strict: Shortcut for ``ValidateOptions(strict=...)``.

    Returns:
        All issues found, in param order. Empty means the params look valid.

    Raises:
        InvalidConnectionStringError: If the string cannot be tokenized.

    """
    return validate_record(parse(connection_string), options, strict=strict)


def validate_record(
    record: ConnectionRecord,
    options: ValidateOptions | None = None,
    *,
    strict: bool | None = None,
) -> list[ValidationIssue]:
    """Same as :func:`validate` for an already parsed record."""
    if strict is not None:
        options = ValidateOptions(strict=strict)
    elif options is None:
        options = ValidateOptions()
    advisory = Severity.ERROR if options.strict else Severity.WARNING

    result = normalize(record)
    config, provider, sub_provider = result.config, result.provider, result.sub_provider
    issues: list[ValidationIssue] = []

    if provider is None:
        issues.append(
            ValidationIssue(
                param="host",
                value=config.host,
                message=f'Unknown provider for host "{config.host}". Validation skipped.',
                severity=advisory,
            )
        )
        return issues

    effective_provider = sub_provider or provider
    specs = PARAM_SPECS[effective_provider]
    known_params = (
        _sub_provider_known_params(provider, sub_provider)
        if sub_provider is not None
        else set(PROVIDER_PARAMS[provider].values())
    )
    family = detect_bedrock_model_family(config.model) if provider == Provider.BEDROCK else None
    logger.debug(f"Validating {len(config.params)} param(s) for {provider} (effective: {effective_provider})")

    for key, value in config.params.items():
        if (
            can_host_openai_models(effective_provider)
            and is_reasoning_model(config.model)
            and key in REASONING_MODEL_UNSUPPORTED
        ):
            issues.append(
                _error(
                    key,
                    value,
                    f'"{key}" is not supported by OpenAI reasoning model "{config.model}". '
                    'Use "reasoning_effort" instead to control output.',
                )
            )
            continue

        if provider == Provider.BEDROCK:
            bedrock_issue = _check_bedrock_family(key, value, config.model, family)
            if bedrock_issue is not None:
                issues.append(bedrock_issue)
                continue

        if key not in known_params and key not in specs:
            issues.append(
                ValidationIssue(
                    param=key,
                    value=value,
                    message=f'Unknown param "{key}" for {effective_provider}.',
                    severity=advisory,
                )
            )
            continue

        spec = specs.get(key)
        if spec is None and sub_provider is not None:
            spec = _lookup_sub_provider_spec(key, provider, sub_provider)
        if spec is None:
            continue

        if _is_anthropic_target(effective_provider, family) and key == "temperature":
            other_key = provider_param_name(provider, "top_p")
            # Reported on temperature only so the pair yields one issue.
            if other_key is not None and other_key in config.params:
                issues.append(
                    _error(
                        key,
                        value,
                        f'Cannot specify both "temperature" and "{other_key}" for Anthropic models.',
                    )
                )

        issues.extend(_check_spec(key, value, spec))

    logger.debug(f"Validation of {config.host}/{config.model} found {len(issues)} issue(s)")
    return issues


def has_errors(issues: list[ValidationIssue]) -> bool:
    return any(issue.severity == Severity.ERROR for issue in issues)


def errors(issues: list[ValidationIssue]) -> list[ValidationIssue]:
    return [issue for issue in issues if issue.severity == Severity.ERROR]


def warnings(issues: list[ValidationIssue]) -> list[ValidationIssue]:
    return [issue for issue in issues if issue.severity == Severity.WARNING]


def _sub_provider_known_params(gateway: Provider, sub_provider: Provider) -> set[str]:
    """Gateway-native names whose canonical param the sub-provider accepts."""
    sub_canonicals = PROVIDER_PARAMS[sub_provider].keys()
    return {native for canonical, native in PROVIDER_PARAMS[gateway].items() if canonical in sub_canonicals}


def _lookup_sub_provider_spec(gateway_key: str, gateway: Provider, sub_provider: Provider) -> ParamSpec | None:
    """Map gateway native -> canonical -> sub-provider native -> spec.

    Gives None for params the sub-provider has no canonical counterpart for.
    """
    canonical = canonical_param_name(gateway, gateway_key) or gateway_key
    sub_key = provider_param_name(sub_provider, canonical)
    if sub_key is None:
        return None
    return param_spec(sub_provider, sub_key)


def _check_bedrock_family(
    key: str,
    value: str,
    model: str,
    family: BedrockModelFamily | None,
) -> ValidationIssue | None:
    top_k = provider_param_name(Provider.BEDROCK, "top_k")
    if key == top_k and family is not None and not bedrock_supports_top_k(family):
        return _error(key, value, f'"{key}" is not supported by {family} models on Bedrock.')

    if key == provider_param_name(Provider.BEDROCK, "cache") and not bedrock_supports_caching(model):
        return _error(
            key,
            value,
            "Prompt caching is only supported for Anthropic Claude and Amazon Nova models on Bedrock, "
            f"not {family or 'unknown'} models.",
        )
    return None


def _is_anthropic_target(effective_provider: Provider, family: BedrockModelFamily | None) -> bool:
    if effective_provider == Provider.ANTHROPIC:
        return True
    return effective_provider == Provider.BEDROCK and family == BedrockModelFamily.ANTHROPIC


def _check_spec(key: str, value: str, spec: ParamSpec) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    if spec.type == "number":
        number = _to_number(value)
        if number is None:
            return [_error(key, value, f'"{key}" should be a number, got "{value}".')]
        if spec.min is not None and number < spec.min:
            issues.append(_error(key, value, f'"{key}" must be >= {_fmt(spec.min)}, got {_fmt(number)}.'))
        if spec.max is not None and number > spec.max:
            issues.append(_error(key, value, f'"{key}" must be <= {_fmt(spec.max)}, got {_fmt(number)}.'))

    elif spec.type == "boolean":
        if value not in BOOLEAN_LITERALS:
            issues.append(_error(key, value, f'"{key}" should be a boolean (true/false), got "{value}".'))

    elif spec.values is not None and value not in spec.values:
        issues.append(_error(key, value, f'"{key}" must be one of [{", ".join(spec.values)}], got "{value}".'))

    return issues


def _to_number(value: str) -> float | None:
    # float() accepts digit separators ("1_000"); wire numbers never carry them.
    if "_" in value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if math.isnan(number):
        return None
    return number


def _fmt(number: float) -> str:
    """Render 2.0 as "2" and 0.5 as "0.5"."""
    if float(number).is_integer():
        return str(int(number))
    return str(number)


def _error(param: str, value: str, message: str) -> ValidationIssue:
    return ValidationIssue(param=param, value=value, message=message, severity=Severity.ERROR)
