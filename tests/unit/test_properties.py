"""Behavioural properties that hold across providers and inputs."""

from __future__ import annotations

import itertools

import pytest

from llm_connection.constants import Severity
from llm_connection.normalize import normalize
from llm_connection.providers import ALIASES
from llm_connection.types import ConnectionRecord
from llm_connection.validate import validate, validate_record

HOSTS = {
    "openai": ("api.openai.com", "gpt-5.2"),
    "openai-reasoning": ("api.openai.com", "o3"),
    "anthropic": ("api.anthropic.com", "claude-sonnet-4-5"),
    "google": ("generativelanguage.googleapis.com", "gemini-2.5-pro"),
    "mistral": ("api.mistral.ai", "mistral-large-latest"),
    "cohere": ("api.cohere.com", "command-a-03-2025"),
    "bedrock-claude": ("bedrock-runtime.us-east-1.amazonaws.com", "anthropic.claude-sonnet-4-5-20250929-v1:0"),
    "bedrock-llama": ("bedrock-runtime.us-east-1.amazonaws.com", "meta.llama3-70b-instruct-v1:0"),
    "openrouter": ("openrouter.ai", "anthropic/claude-sonnet-4-5"),
    "vercel": ("gateway.ai.vercel.sh", "openai/o4-mini"),
    "unknown": ("custom.example.com", "my-model"),
}


def _record(target: str, params: dict[str, str]) -> ConnectionRecord:
    host, model = HOSTS[target]
    return ConnectionRecord(host=host, model=model, params=params)


@pytest.mark.parametrize("target", list(HOSTS))
def test_normalization_is_idempotent(target):
    raw = {"temp": "0.5", "max": "100", "topp": "0.9", "stop": "END", "seed": "7", "cache": "5m"}
    once = normalize(_record(target, raw)).config
    twice = normalize(once, verbose=True)
    assert twice.config.params == once.params
    assert twice.changes == []


@pytest.mark.parametrize("target", list(HOSTS))
def test_alias_confluence(target):
    for alias, canonical in ALIASES.items():
        value = "true" if canonical == "cache" else "1"
        via_alias = normalize(_record(target, {alias: value})).config.params
        via_canonical = normalize(_record(target, {canonical: value})).config.params
        assert via_alias == via_canonical, f"{target}: {alias} vs {canonical}"


@pytest.mark.parametrize("target", ["anthropic", "bedrock-claude"])
def test_cache_duration_yields_directive_and_ttl(target):
    params = normalize(_record(target, {"cache": "5m"})).config.params
    assert params == {"cache_control": "ephemeral", "cache_ttl": "5m"}


@pytest.mark.parametrize("target", ["openai", "google", "bedrock-llama", "openrouter", "vercel"])
def test_cache_dropped_when_unsupported(target):
    assert normalize(_record(target, {"cache": "true"})).config.params == {}


@pytest.mark.parametrize("target", list(HOSTS))
def test_validation_independent_of_param_order(target):
    params = {"temp": "3", "top_p": "0.9", "stream": "maybe", "made_up": "x", "topk": "1000"}
    baseline = {issue.model_dump_json() for issue in validate_record(_record(target, params))}
    for order in itertools.permutations(params):
        reordered = {key: params[key] for key in order}
        issues = validate_record(_record(target, reordered))
        assert {issue.model_dump_json() for issue in issues} == baseline


@pytest.mark.parametrize("target", list(HOSTS))
def test_validation_independent_of_order_with_colliding_keys(target):
    params = {
        "temp": "3",
        "temperature": "0.5",
        "max_tokens": "100",
        "maxOutputTokens": "50",
        "cache": "30m",
        "cache_ttl": "1h",
    }
    baseline = {issue.model_dump_json() for issue in validate_record(_record(target, params))}
    for order in itertools.permutations(params):
        reordered = {key: params[key] for key in order}
        issues = validate_record(_record(target, reordered))
        assert {issue.model_dump_json() for issue in issues} == baseline, f"{target}: {order}"


@pytest.mark.parametrize(
    "connection_string",
    [
        "llm://custom-api.com/my-model?temp=0.5",
        "llm://api.openai.com/gpt-5.2?made_up=1&temp=3",
        "llm://openrouter.ai/anthropic/claude-sonnet-4-5?frequency_penalty=0.5&temp=0.7&top_p=0.9",
        "llm://api.openai.com/o3?temp=0.7&bogus=1",
    ],
)
def test_strict_mode_only_upgrades_severity(connection_string):
    lenient = validate(connection_string)
    strict = validate(connection_string, strict=True)
    assert len(strict) == len(lenient)
    for before, after in zip(lenient, strict, strict=True):
        assert (before.param, before.value, before.message) == (after.param, after.value, after.message)
        if before.severity == Severity.ERROR:
            assert after.severity == Severity.ERROR
        else:
            assert after.severity in (Severity.WARNING, Severity.ERROR)
    assert all(issue.severity == Severity.ERROR for issue in strict)


def test_validate_never_raises_on_odd_values():
    odd = {"temp": "", "max": "1e309", "stream": "", "effort": "", "cache": "", "seed": "-inf"}
    for target in HOSTS:
        validate_record(_record(target, odd))
