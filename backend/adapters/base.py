from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from models import RawResult


@dataclass
class ChallengeResult:
    """Outcome of waiting out the anti-bot widget."""
    solved: bool
    detail: str = ""


@dataclass
class SubmitResult:
    """Outcome of filling and submitting the search form."""
    success: bool
    detail: str = ""


@dataclass
class ExtractionResult:
    """Raw records scraped from the results page."""
    success: bool
    results: list[RawResult] = field(default_factory=list)
    detail: str = ""
    strategy: str = "primary"  # primary | fallback | failed


@dataclass
class DetailsResult:
    """Fields read from a single trademark's details page."""
    success: bool
    details: dict = field(default_factory=dict)
    detail: str = ""


class ResultExtractor(ABC):
    """Turns a rendered results page into raw records.

    Kept behind this interface so the markup heuristic can be swapped or
    versioned without touching the workflow.
    """

    @abstractmethod
    async def extract(self, page) -> ExtractionResult:
        ...
