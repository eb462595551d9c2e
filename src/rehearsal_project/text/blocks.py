"""
blocks.py

This module turns normalized script text into line blocks, stage directions
and act/scene sections.

Purpose in the pipeline
-----------------------
After cleaners.normalize_text() every logical line of the script is on its
own line. A play interleaves:

    - ACT / SCENE headings
    - SPEAKER labels ("LEONATO.") or speaker + dialogue on one line
    - DIALOGUE
    - STAGE DIRECTIONS ("Enter Beatrice", "[Aside]")

parse_blocks() does one left-to-right pass. Each line is classified once
(classifiers.classify_line) and dispatched on its kind; all running state
lives in a ParserState value rather than module globals.

Ordering
--------
Line blocks and stage directions share one order_index counter, so merging
both lists by order_index reproduces source order. A stage direction in the
middle of a speech is emitted at once, before the speech it interrupts is
flushed.

Dialogue seen before any speaker label (title pages, dramatis personae) is
dropped.

This module is deterministic and performs no I/O.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from rehearsal_project.text.classifiers import classify_line
from rehearsal_project.text.models import (
    ClassifiedLine,
    LineBlock,
    LineKind,
    Section,
    StageDirection,
    default_section,
)


def normalize_speaker_name(label: str) -> str:
    """ "DON PEDRO:" -> "Don Pedro" """
    t = label.strip()
    if t.endswith((".", ":")):
        t = t[:-1]
    return " ".join(w[:1].upper() + w[1:].lower() for w in t.split())


@dataclass
class BlockParse:
    line_blocks: List[LineBlock]
    stage_directions: List[StageDirection]
    sections: List[Section]
    characters: List[str]


@dataclass
class ParserState:
    """
    Running state of one parse.

    current_section_index is -1 until the first section is opened.
    current_act_number is sticky: a bare "ACT II" applies to every following
    scene-only heading until the next act heading.
    characters keeps first-seen order; a dict doubles as an ordered set.
    """
    order_index: int = 0
    current_speaker: Optional[str] = None
    current_dialogue: List[str] = field(default_factory=list)
    current_section_index: int = -1
    current_act_number: Optional[int] = None
    line_blocks: List[LineBlock] = field(default_factory=list)
    stage_directions: List[StageDirection] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    characters: Dict[str, None] = field(default_factory=dict)

    def flush(self) -> None:
        if self.current_speaker and self.current_dialogue:
            text_raw = " ".join(self.current_dialogue).strip()
            if text_raw:
                self.line_blocks.append(
                    LineBlock(
                        order_index=self.order_index,
                        speaker_name=self.current_speaker,
                        text_raw=text_raw,
                        section_index=(
                            self.current_section_index if self.current_section_index >= 0 else None
                        ),
                    )
                )
                self.characters.setdefault(self.current_speaker, None)
                self.order_index += 1
        self.current_dialogue = []


def _on_heading(state: ParserState, line: ClassifiedLine) -> None:
    state.flush()
    state.current_speaker = None

    heading = line.heading
    if heading is None:
        return

    act = heading.act_number
    scene = heading.scene_number
    title = heading.title

    if act is not None and scene is None:
        state.current_act_number = act
        return

    if act is None and scene is not None and state.current_act_number is not None:
        act = state.current_act_number
        title = f"Act {act}, Scene {scene}"
    elif act is not None:
        state.current_act_number = act

    if scene is None:
        return

    state.sections.append(
        Section(title=title, act_number=act, scene_number=scene, order_index=len(state.sections))
    )
    state.current_section_index = len(state.sections) - 1


def _on_stage_direction(state: ParserState, line: ClassifiedLine) -> None:
    state.stage_directions.append(StageDirection(order_index=state.order_index, text_raw=line.text))
    state.order_index += 1


def _on_speaker_label(state: ParserState, line: ClassifiedLine) -> None:
    state.flush()
    state.current_speaker = normalize_speaker_name(line.text)


def _on_inline_speaker_start(state: ParserState, line: ClassifiedLine) -> None:
    state.flush()
    state.current_speaker = normalize_speaker_name(line.inline.speaker_label)
    state.current_dialogue = [line.inline.rest.strip()]


def _on_dialogue(state: ParserState, line: ClassifiedLine) -> None:
    if state.current_speaker:
        state.current_dialogue.append(line.text)


_HANDLERS = {
    LineKind.HEADING: _on_heading,
    LineKind.STAGE_DIRECTION: _on_stage_direction,
    LineKind.SPEAKER_LABEL: _on_speaker_label,
    LineKind.INLINE_SPEAKER_START: _on_inline_speaker_start,
    LineKind.DIALOGUE: _on_dialogue,
}


def step(state: ParserState, line: str) -> ParserState:
    """Feed one normalized line into the parse."""
    t = line.strip()
    if t:
        classified = classify_line(t)
        _HANDLERS[classified.kind](state, classified)
    return state


def parse_blocks(normalized_text: str) -> BlockParse:
    """
    Parse normalized text into blocks, directions, sections and characters.

    If no act/scene heading produced a section, a single "Full Script"
    section (act 1, scene 1) is created and every block is assigned to it.
    Preceding cues are left as None; see cues.compute_cues().
    """
    state = ParserState()
    for line in normalized_text.split("\n"):
        step(state, line)
    state.flush()

    sections = list(state.sections)
    line_blocks = list(state.line_blocks)
    if not sections:
        sections = [default_section()]
        line_blocks = [replace(b, section_index=0) for b in line_blocks]

    return BlockParse(
        line_blocks=line_blocks,
        stage_directions=list(state.stage_directions),
        sections=sections,
        characters=list(state.characters),
    )
