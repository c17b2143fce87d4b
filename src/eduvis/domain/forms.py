"""Form submission and state models."""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from eduvis.domain.domains import DEFAULT_DOMAIN, Domain
from eduvis.domain.media import parse_data_uri

MIN_PROMPT_LENGTH = 3


class FormStatus(StrEnum):
    """Observable states of the form."""

    IDLE = "idle"
    LOADING = "loading"
    SETTLED = "settled"


class SubmissionForm(BaseModel):
    """Submitted form values.

    An attached photo takes precedence over the prompt. The prompt is only
    required, and only used, when no photo is attached.
    """

    model_config = ConfigDict(populate_by_name=True)

    domain: Domain = DEFAULT_DOMAIN
    photo_data_uri: str | None = Field(default=None, alias="photoDataUri")
    prompt: str | None = Field(default="", validate_default=True)

    @field_validator("photo_data_uri")
    @classmethod
    def _validate_photo(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        parse_data_uri(value)
        return value.strip()

    @field_validator("prompt")
    @classmethod
    def _validate_prompt(cls, value: str | None, info: ValidationInfo) -> str:
        value = value or ""
        # A rejected photo is absent from info.data; only its own error is reported.
        if "photo_data_uri" not in info.data or info.data["photo_data_uri"]:
            return value
        if len(value) < MIN_PROMPT_LENGTH:
            raise ValueError(
                f"Prompt must be at least {MIN_PROMPT_LENGTH} characters."
            )
        return value

    @property
    def has_photo(self) -> bool:
        return self.photo_data_uri is not None


class FormSnapshot(BaseModel):
    """What the form and result panes currently show."""

    model_config = ConfigDict(populate_by_name=True)

    status: FormStatus
    prompt: str
    domain: Domain
    photo_data_uri: str | None = Field(default=None, alias="photoDataUri")
    generated_content: str | None = Field(default=None, alias="generatedContent")
    is_error: bool = Field(default=False, alias="isError")
    history_size: int = Field(default=0, alias="historySize")


class SubmissionOutcome(BaseModel):
    """Result of one settled submission."""

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["visual", "explanation"]
    content: str
    is_error: bool = Field(alias="isError")
    recorded: bool
    state: FormSnapshot
