"""Supported educational domains."""

from enum import StrEnum


class Domain(StrEnum):
    """Closed set of subject areas a request may target."""

    BIOLOGY = "Biology"
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    GEOGRAPHY_ENVIRONMENT = "Geography & Environment"
    SPACE_SCIENCE = "Space Science"
    ENGINEERING = "Engineering"
    COMPUTER_SCIENCE = "Computer Science"
    MATHEMATICS = "Mathematics"

    @property
    def label(self) -> str:
        """Return the display label for the domain."""
        return self.value

    @property
    def examples(self) -> str:
        """Return sample topics that belong to the domain."""
        return DOMAIN_EXAMPLES[self]


DOMAIN_EXAMPLES: dict[Domain, str] = {
    Domain.BIOLOGY: "anatomy, cells, organs, systems",
    Domain.PHYSICS: "forces, optics, motion, electricity",
    Domain.CHEMISTRY: "atoms, lab apparatus, molecular structures",
    Domain.GEOGRAPHY_ENVIRONMENT: "ecosystems, water cycle, climate diagrams",
    Domain.SPACE_SCIENCE: "solar system, black holes, phases of moon",
    Domain.ENGINEERING: "circuits, machines, gear systems",
    Domain.COMPUTER_SCIENCE: "logic gates, flowcharts, AI diagrams",
    Domain.MATHEMATICS: "graphs, geometry shapes, algebra visualizations",
}

DEFAULT_DOMAIN = Domain.BIOLOGY
