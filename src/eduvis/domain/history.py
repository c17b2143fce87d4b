"""History entries recorded for successful submissions."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from eduvis.domain.domains import Domain


class VisualHistoryEntry(BaseModel):
    """A generated visual together with the request that produced it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["visual"] = "visual"
    prompt: str
    domain: Domain
    image: str


class ExplanationHistoryEntry(BaseModel):
    """An explanation together with the uploaded image."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["explanation"] = "explanation"
    photo_data_uri: str = Field(alias="photoDataUri")
    domain: Domain
    explanation: str


HistoryEntry = Annotated[
    VisualHistoryEntry | ExplanationHistoryEntry, Field(discriminator="kind")
]
