"""Rewrite connection params into a provider's native vocabulary."""

from __future__ import annotations

from dataclasses import dataclass

from llm_connection.constants import BOOLEAN_TRUE_VALUES, DURATION_RE, Provider
from llm_connection.log_config import logger
from llm_connection.providers import (
    ALIASES,
    CACHE_VALUES,
    REASONING_MAX_TOKENS_PARAM,
    can_host_openai_models,
    detect_gateway_sub_provider,
    detect_provider,
    is_gateway_provider,
    is_reasoning_model,
    provider_param_name,
    supports_explicit_caching,
)
from llm_connection.types import ConnectionRecord, NormalizeChange, NormalizeOptions, NormalizeResult

CACHE_PARAM = "cache"
CACHE_TTL_PARAM = "cache_ttl"
DROPPED = "(dropped)"


@dataclass(frozen=True, slots=True)
class _Candidate:
    """One output pair produced from one input param."""

    key: str | None
    raw_key: str
    value: str
    steps: int
    changes: list[NormalizeChange]

    @property
    def precedence(self) -> tuple[int, str]:
        # Already-native keys first, then fewest rewrites, then input name.
        return (0 if self.key == self.raw_key else self.steps, self.raw_key)


def normalize(
    record: ConnectionRecord,
    options: NormalizeOptions | None = None,
    *,
    verbose: bool | None = None,
) -> NormalizeResult:
    """Normalize a connection record's params for its target provider.

    1. Expands shorthand aliases (``temp`` -> ``temperature``).
    2. Turns ``cache`` into the provider's cache directive, or drops it
       when the provider/model cannot cache explicitly.
    3. Maps canonical names to native ones (``max_tokens`` ->
       ``maxOutputTokens`` for Google).
    4. Renames ``max_tokens`` to ``max_completion_tokens`` for OpenAI
       reasoning models, direct or through a gateway.

    When several params end up under the same key, a param already spelled
    natively wins over rewritten ones, then the one needing fewer rewrites,
    then the alphabetically first input name. Input order never matters.
    Losers are logged as dropped.

    Unknown hosts still get step 1. The input record is not modified.

    Args:
        record: Parsed connection record.
        options: Normalization options.
        verbose: Shortcut for ``NormalizeOptions(verbose=...)``.

    Returns:
        NormalizeResult with the rewritten record, the detected provider,
        the gateway sub-provider (if any) and the change log (verbose only).

    """
    if verbose is not None:
        options = NormalizeOptions(verbose=verbose)
    elif options is None:
        options = NormalizeOptions()

    provider = detect_provider(record.host)
    sub_provider = (
        detect_gateway_sub_provider(record.model) if provider is not None and is_gateway_provider(provider) else None
    )
    if provider is None:
        logger.debug(f"Unknown provider for host '{record.host}', expanding aliases only")

    candidates: list[_Candidate] = []
    for raw_key, value in record.params.items():
        candidates.extend(_rewrite_param(provider, sub_provider, record.model, raw_key, value))

    winners: dict[str, _Candidate] = {}
    for candidate in candidates:
        if candidate.key is None:
            continue
        current = winners.get(candidate.key)
        if current is None or candidate.precedence < current.precedence:
            winners[candidate.key] = candidate

    params: dict[str, str] = {}
    changes: list[NormalizeChange] = []
    for candidate in candidates:
        if candidate.key is None or winners[candidate.key] is candidate:
            if candidate.key is not None:
                params[candidate.key] = candidate.value
            changes.extend(candidate.changes)
            continue
        winner = winners[candidate.key]
        logger.debug(f"Dropping {candidate.raw_key}={candidate.value}: {candidate.key} already set by {winner.raw_key}")
        changes.append(
            _change(
                candidate.raw_key,
                DROPPED,
                candidate.value,
                f'"{candidate.key}" is already set by "{winner.raw_key}"',
            )
        )

    return NormalizeResult(
        config=record.model_copy(update={"params": params}),
        provider=provider,
        sub_provider=sub_provider,
        changes=changes if options.verbose else [],
    )


def _rewrite_param(
    provider: Provider | None,
    sub_provider: Provider | None,
    model: str,
    raw_key: str,
    value: str,
) -> list[_Candidate]:
    key = raw_key
    pending: list[NormalizeChange] = []

    canonical = ALIASES.get(key)
    if canonical is not None:
        pending.append(_change(key, canonical, value, f'alias: "{key}" -> "{canonical}"'))
        key = canonical

    if key == CACHE_PARAM and provider is not None:
        cache_changes = _rewrite_cache(provider, model, value)
        if cache_changes is not None:
            if cache_changes[0].to == DROPPED:
                return [_Candidate(None, raw_key, value, len(pending) + 1, pending + cache_changes)]
            # The alias change is logged once, with the first emitted pair.
            return [
                _Candidate(change.to, raw_key, change.value, len(pending) + 1, (pending if i == 0 else []) + [change])
                for i, change in enumerate(cache_changes)
            ]

    if provider is not None:
        native = provider_param_name(provider, key)
        if native is not None and native != key:
            pending.append(_change(key, native, value, f'{provider} uses "{native}" instead of "{key}"'))
            key = native

    effective_provider = sub_provider or provider
    if (
        effective_provider is not None
        and can_host_openai_models(effective_provider)
        and is_reasoning_model(model)
        and key == provider_param_name(provider, "max_tokens")
    ):
        pending.append(
            _change(
                key,
                REASONING_MAX_TOKENS_PARAM,
                value,
                f"OpenAI reasoning models use {REASONING_MAX_TOKENS_PARAM} instead of {key}",
            )
        )
        key = REASONING_MAX_TOKENS_PARAM

    # A key rewritten back to its own spelling is already native.
    return [_Candidate(key, raw_key, value, len(pending), pending if key != raw_key else [])]


def _rewrite_cache(provider: Provider, model: str, value: str) -> list[NormalizeChange] | None:
    """Expand the ``cache`` pseudo-param.

    Returns one change per emitted native pair, a single change to
    ``(dropped)`` when the model cannot cache explicitly, or None when the
    value is neither a boolean nor a duration and should pass through.
    """
    if not supports_explicit_caching(provider, model):
        logger.debug(f"Dropping cache={value}: not supported by {provider} model '{model}'")
        return [
            _change(
                CACHE_PARAM,
                DROPPED,
                value,
                f"{provider} does not use a cache param for '{model}' (caching is automatic, API-level or unsupported)",
            )
        ]

    is_duration = DURATION_RE.match(value) is not None
    if value not in BOOLEAN_TRUE_VALUES and not is_duration:
        return None

    cache_value: str = CACHE_VALUES[provider]  # type: ignore[assignment]
    cache_key = provider_param_name(provider, CACHE_PARAM) or CACHE_PARAM
    reason = f"cache={value} -> {cache_key}={cache_value} for {provider}"
    changes = [_change(CACHE_PARAM, cache_key, cache_value, reason)]

    if is_duration:
        ttl_key = provider_param_name(provider, CACHE_TTL_PARAM) or CACHE_TTL_PARAM
        changes.append(_change(CACHE_PARAM, ttl_key, value, f"cache={value} -> {ttl_key}={value} for {provider}"))

    return changes


def _change(from_: str, to: str, value: str, reason: str) -> NormalizeChange:
    return NormalizeChange(from_=from_, to=to, value=value, reason=reason)
