"""
models.py

Plain records produced by the script parser.

Everything here is a frozen dataclass: the parser builds these once per
uploaded script and nothing downstream in this package mutates them. Edits
(see text/edits.py) build new records with dataclasses.replace().

    Section         act/scene grouping of line blocks
    LineBlock       one contiguous run of dialogue by one speaker
    StageDirection  a stage direction line, sharing the block order counter
    ParseResult     the bundle handed to persistence
"""
from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_SECTION_TITLE = "Full Script"


@dataclass(frozen=True)
class Heading:
    """
    Parsed act/scene heading.

    act_number / scene_number are None when the heading does not state them.
    """
    title: str
    act_number: Optional[int]
    scene_number: Optional[int]


@dataclass(frozen=True)
class InlineSpeakerStart:
    speaker_label: str
    rest: str


class LineKind(enum.Enum):
    HEADING = "heading"
    STAGE_DIRECTION = "stage_direction"
    SPEAKER_LABEL = "speaker_label"
    INLINE_SPEAKER_START = "inline_speaker_start"
    DIALOGUE = "dialogue"


@dataclass(frozen=True)
class ClassifiedLine:
    """
    One normalized line plus what it was recognized as.

    heading is set only for HEADING lines that parse; inline only for
    INLINE_SPEAKER_START.
    """
    kind: LineKind
    text: str
    heading: Optional[Heading] = None
    inline: Optional[InlineSpeakerStart] = None


@dataclass(frozen=True)
class Section:
    title: str
    act_number: Optional[int]
    scene_number: Optional[int]
    order_index: int


@dataclass(frozen=True)
class LineBlock:
    """
    order_index: global position, shared with stage directions
    speaker_name: title-cased speaker ("Don Pedro")
    text_raw: dialogue text, soft wraps already merged
    preceding_cue_raw: text of the nearest earlier block by another speaker
    section_index: index into ParseResult.sections, None if unassigned
    """
    order_index: int
    speaker_name: str
    text_raw: str
    preceding_cue_raw: Optional[str] = None
    section_index: Optional[int] = None


@dataclass(frozen=True)
class StageDirection:
    order_index: int
    text_raw: str


@dataclass(frozen=True)
class ParseResult:
    normalized_text: str
    line_blocks: List[LineBlock] = field(default_factory=list)
    stage_directions: List[StageDirection] = field(default_factory=list)
    characters: List[str] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "ParseResult":
        return cls(
            normalized_text=obj.get("normalized_text", ""),
            line_blocks=[LineBlock(**b) for b in obj.get("line_blocks", [])],
            stage_directions=[StageDirection(**d) for d in obj.get("stage_directions", [])],
            characters=list(obj.get("characters", [])),
            sections=[Section(**s) for s in obj.get("sections", [])],
        )


def default_section() -> Section:
    return Section(title=DEFAULT_SECTION_TITLE, act_number=1, scene_number=1, order_index=0)
