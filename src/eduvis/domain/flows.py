"""Input and output models for the generation flows."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eduvis.domain.domains import Domain
from eduvis.domain.media import parse_data_uri

ERROR_MARKER = "❌"
REFUSAL_PHRASE = "I don't do that"
REFUSAL_MESSAGE = (
    f'{ERROR_MARKER} "{REFUSAL_PHRASE}. '
    'I only create educational and scientific visuals."'
)
EXPLANATION_APOLOGY = f"{ERROR_MARKER} Sorry, I was unable to explain that image."
UNEXPECTED_ERROR_MESSAGE = f"{ERROR_MARKER} An unexpected error occurred."


def is_error_result(content: str | None) -> bool:
    """Return true when a flow result carries the error marker."""
    return bool(content) and content.startswith(ERROR_MARKER)


class VisualRequest(BaseModel):
    """Concept to visualize within a domain."""

    prompt: str = Field(description="The concept to visualize (e.g., mitosis).")
    domain: Domain


class GenerationResult(BaseModel):
    """Generated image as a data URI, or a marker-prefixed refusal."""

    image: str

    @property
    def is_error(self) -> bool:
        return is_error_result(self.image)


class ExplanationRequest(BaseModel):
    """Uploaded image to explain within a domain."""

    model_config = ConfigDict(populate_by_name=True)

    photo_data_uri: str = Field(
        alias="photoDataUri",
        description=(
            "A photo of a visual, as a data URI that must include a MIME type "
            "and use Base64 encoding."
        ),
    )
    domain: Domain

    @field_validator("photo_data_uri")
    @classmethod
    def _validate_data_uri(cls, value: str) -> str:
        parse_data_uri(value)
        return value.strip()


class ExplanationResult(BaseModel):
    """Explanation text, or a marker-prefixed apology."""

    explanation: str

    @property
    def is_error(self) -> bool:
        return is_error_result(self.explanation)


class ImageGenerationOutput(BaseModel):
    """Raw output of a single image-generation call."""

    text: str = ""
    image_base64: str | None = None
