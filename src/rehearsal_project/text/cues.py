"""
cues.py

Attach the preceding cue to every line block.

A cue is what another character said last before this block. It is what an
actor hears on stage before speaking, and what the cue-recall practice mode
shows as the prompt:

    LEONATO  "I learn in this letter..."        cue: None
    HERO     "I think it is."                   cue: "I learn in this letter..."
    HERO     "My cousin means Signior..."       cue: "I learn in this letter..."

A speaker's own earlier blocks are skipped when searching backward.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from rehearsal_project.text.models import LineBlock


def compute_cues(line_blocks: List[LineBlock]) -> List[LineBlock]:
    """
    Return the blocks sorted by order_index with preceding_cue_raw set.

    Runs in one pass: the last block text per speaker run is carried forward,
    so long scripts stay linear.
    """
    ordered = sorted(line_blocks, key=lambda b: b.order_index)
    out: List[LineBlock] = []

    # (speaker, text) of the latest block, and the latest text by anyone else
    last_speaker: Optional[str] = None
    last_text: Optional[str] = None
    cue_before_run: Optional[str] = None

    for block in ordered:
        if last_speaker is None:
            cue = None
        elif block.speaker_name == last_speaker:
            cue = cue_before_run
        else:
            cue = last_text
            cue_before_run = last_text
        out.append(replace(block, preceding_cue_raw=cue))
        last_speaker = block.speaker_name
        last_text = block.text_raw
    return out
