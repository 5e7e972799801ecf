from pydantic import BaseModel, ConfigDict, Field

from llm_connection.constants import Provider, Severity


class ConnectionRecord(BaseModel):
    """Decomposed form of an ``llm://`` connection string.

    Parameter values are always strings; nothing is coerced until validation.
    """

    model_config = ConfigDict(frozen=True)

    host: str
    model: str
    label: str | None = None
    api_key: str | None = None
    params: dict[str, str] = Field(default_factory=dict)
    raw: str | None = None


class NormalizeChange(BaseModel):
    """One rewrite performed during normalization."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    value: str
    reason: str


class NormalizeOptions(BaseModel):
    verbose: bool = False


class NormalizeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    config: ConnectionRecord
    provider: Provider | None = None
    sub_provider: Provider | None = None
    changes: list[NormalizeChange] = Field(default_factory=list)


class ValidateOptions(BaseModel):
    # Promote unknown-provider and unknown-param warnings to errors.
    strict: bool = False


class ValidationIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    param: str
    value: str
    message: str
    severity: Severity
