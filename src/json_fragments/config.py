from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, Json, JsonValue, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Delimiter = Annotated[str, Field(min_length=1)]


class MissingFragmentBehavior(StrEnum):
    """What to do when a referenced fragment is absent from the fragment map."""

    THROW = "throw"
    LEAVE_UNRESOLVED = "leave_unresolved"
    USE_DEFAULT = "use_default"
    REMOVE = "remove"


class ResolverConfig(BaseModel):
    """Immutable resolution policy shared by every call of a resolver."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    delimiter_start: Delimiter = Field(
        default="[",
        description="Text opening a fragment reference.",
        examples=["[", "{{", "${"],
    )
    delimiter_end: Delimiter = Field(
        default="]",
        description="Text closing a fragment reference.",
        examples=["]", "}}", "}"],
    )
    missing_fragment_behavior: MissingFragmentBehavior = Field(
        default=MissingFragmentBehavior.THROW,
        description="Policy applied to references whose fragment is missing.",
    )
    default_value: JsonValue = Field(
        default=None,
        description="Substitute for missing fragments when the policy is 'use_default'.",
        examples=["N/A", 0, None],
    )

    @model_validator(mode="after")
    def validate_delimiters(self) -> Self:
        if self.delimiter_start == self.delimiter_end:
            raise ValueError("delimiter_start and delimiter_end must differ")
        return self

    def wrap(self, fragment_name: str) -> str:
        """Render a fragment name as reference text."""
        return f"{self.delimiter_start}{fragment_name}{self.delimiter_end}"


class ResolverSettings(BaseSettings):
    """Resolver policy read from JSON_FRAGMENTS_* environment variables."""

    delimiter_start: Delimiter = Field(default="[")
    delimiter_end: Delimiter = Field(default="]")
    missing_fragment_behavior: MissingFragmentBehavior = Field(default=MissingFragmentBehavior.THROW)
    # raw JSON text, validated like the environment value
    default_value: Json[JsonValue] = Field(default="null")

    model_config = SettingsConfigDict(env_prefix="JSON_FRAGMENTS_")

    def to_config(self) -> ResolverConfig:
        return ResolverConfig.model_validate(self.model_dump())
