"""Editorial suggestion models returned by content generation.

A suggestion is either structured (the four fields the prompt asks for) or
raw (the model's text, kept verbatim when it could not be read as JSON).
"""

from dataclasses import dataclass, field
from typing import Literal, Optional, Union


@dataclass(frozen=True)
class ThumbnailMoment:
    """A candidate thumbnail frame proposed by the model."""

    timestamp: str  # MM:SS.mmm as requested in the prompt
    description: str

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "description": self.description}


@dataclass(frozen=True)
class StructuredSuggestion:
    """Parsed model output. Fields the model left out stay None."""

    summary: Optional[str] = None
    titles: Optional[list[str]] = None
    descriptions: Optional[list[str]] = None
    thumbnails: Optional[list[ThumbnailMoment]] = None
    kind: Literal["structured"] = field(default="structured", init=False)

    def to_dict(self) -> dict:
        """Convert to dictionary, omitting absent fields."""
        data: dict = {"kind": self.kind}
        if self.summary is not None:
            data["summary"] = self.summary
        if self.titles is not None:
            data["titles"] = list(self.titles)
        if self.descriptions is not None:
            data["descriptions"] = list(self.descriptions)
        if self.thumbnails is not None:
            data["thumbnails"] = [moment.to_dict() for moment in self.thumbnails]
        return data


@dataclass(frozen=True)
class RawSuggestion:
    """Unparsed model text, returned when no JSON object could be read."""

    text: str
    kind: Literal["raw"] = field(default="raw", init=False)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "rawContent": self.text}


ContentSuggestion = Union[StructuredSuggestion, RawSuggestion]
