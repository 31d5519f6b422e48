from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class DispatcherSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    retain_finished: int | None = Field(default=None, ge=1)
    log_level: LogLevel = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


class TrackingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tracking_uri: str | None = None
    experiment_name: str = "suite-dispatch"


class JsonCommandSuiteConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["json_command"]
    command: str = Field(min_length=1)
    args: list[str] = Field(default_factory=list)
    cwd: str | None = None
    env: dict[str, str] | None = None
    description: str | None = None


class PytestSuiteConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["pytest"]
    path: str = Field(min_length=1)
    python: str | None = None
    extra_args: list[str] = Field(default_factory=list)
    cwd: str | None = None
    description: str | None = None


SuiteConfig = Annotated[
    JsonCommandSuiteConfig | PytestSuiteConfig,
    Field(discriminator="kind"),
]


class DispatchConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dispatcher: DispatcherSettings = Field(default_factory=DispatcherSettings)
    tracking: TrackingSettings | None = None
    suites: dict[str, SuiteConfig] = Field(default_factory=dict)

    @field_validator("suites")
    @classmethod
    def _validate_suite_names(cls, value: dict[str, SuiteConfig]) -> dict[str, SuiteConfig]:
        for name in value:
            if not name or not name.strip():
                raise ValueError("suite names must be non-empty strings")
        return value
