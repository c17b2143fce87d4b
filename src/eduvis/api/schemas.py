"""Response models for the HTTP API."""

from pydantic import BaseModel

from eduvis.domain.domains import Domain
from eduvis.domain.history import HistoryEntry


class DomainOption(BaseModel):
    """Selectable domain for the form."""

    value: Domain
    label: str
    examples: str


class DomainsResponse(BaseModel):
    domains: list[DomainOption]


class HistoryResponse(BaseModel):
    entries: list[HistoryEntry]


def domain_options() -> DomainsResponse:
    """Return the domains in display order."""
    return DomainsResponse(
        domains=[
            DomainOption(value=domain, label=domain.label, examples=domain.examples)
            for domain in Domain
        ]
    )
