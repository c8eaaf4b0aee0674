"""Generator configuration.

Values come from defaults, then environment variables, then CLI options.
Configuration is read once per build and never changes a build midway.
"""

import os

from pydantic import BaseModel, Field, field_validator

from rpc_describe.generator.base import OPENRPC_VERSION, ExternalDocs, Info

ENV_PREFIX = "RPC_DESCRIBE_"


class GeneratorConfig(BaseModel):
    """Settings for one document build."""

    separator: str = Field(
        "_",
        description="Joins namespace and method name into the qualified name",
    )
    subscribe_suffix: str = Field(
        "_subscribe",
        description="Qualified names ending with this suffix are push methods and are skipped",
    )
    reserved_namespace: str = Field(
        "rpc",
        description="Internal namespace never included in the document",
    )
    openrpc_version: str = OPENRPC_VERSION
    info: Info = Field(default_factory=Info)
    external_docs: ExternalDocs | None = Field(
        default_factory=lambda: ExternalDocs(
            description="Source",
            url="https://github.com/etclabscore/core-geth",
        )
    )

    @field_validator("separator")
    @classmethod
    def separator_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("separator must not be empty")
        return v

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Load configuration from ``RPC_DESCRIBE_*`` environment variables."""
        values = {}
        for field in ("separator", "subscribe_suffix", "reserved_namespace"):
            raw = os.getenv(ENV_PREFIX + field.upper())
            if raw is not None:
                values[field] = raw
        return cls(**values)

    def with_overrides(self, **overrides: str | None) -> "GeneratorConfig":
        """Return a validated copy with the non-None overrides applied."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).model_validate(data)
