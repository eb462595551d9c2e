"""
edits.py

Manual corrections to a parsed script: split, merge, delete and re-attribute
line blocks.

The automatic parse is never perfect (a speaker label the heuristics missed,
two speeches glued together across a page break). These functions apply the
fixes an admin makes while reviewing a parse. Each one takes a ParseResult
and returns a new one; the input is left untouched.

After every edit:
  - order_index is re-assigned 0..n-1 over blocks and stage directions
    together, in their current order, so the two lists stay interleaved;
  - preceding cues are recomputed;
  - the character list is rebuilt from the remaining blocks.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Tuple, Union

from rehearsal_project.text.cues import compute_cues
from rehearsal_project.text.models import LineBlock, ParseResult, StageDirection


class BlockEditError(ValueError):
    """Raised when an edit cannot be applied to the given parse."""


Item = Union[LineBlock, StageDirection]
# (order_index, 0) for existing items; (order_index, 1) for the tail of a split.
Key = Tuple[int, int]


def _find_block(result: ParseResult, order_index: int) -> Tuple[int, LineBlock]:
    for i, b in enumerate(result.line_blocks):
        if b.order_index == order_index:
            return i, b
    raise BlockEditError(f"no line block with order_index={order_index}")


def _keyed(blocks: List[LineBlock]) -> List[Tuple[Key, LineBlock]]:
    return [((b.order_index, 0), b) for b in blocks]


def _rebuild(result: ParseResult, blocks: List[Tuple[Key, LineBlock]]) -> ParseResult:
    items: List[Tuple[Key, Item]] = list(blocks)
    items += [((d.order_index, 0), d) for d in result.stage_directions]
    items.sort(key=lambda x: x[0])

    new_blocks: List[LineBlock] = []
    new_dirs: List[StageDirection] = []
    for idx, (_, item) in enumerate(items):
        if isinstance(item, LineBlock):
            new_blocks.append(replace(item, order_index=idx))
        else:
            new_dirs.append(replace(item, order_index=idx))

    characters: List[str] = []
    for b in new_blocks:
        if b.speaker_name not in characters:
            characters.append(b.speaker_name)

    return replace(
        result,
        line_blocks=compute_cues(new_blocks),
        stage_directions=new_dirs,
        characters=characters,
    )


def split_block(
    result: ParseResult,
    order_index: int,
    position: int,
    new_speaker: Optional[str] = None,
) -> ParseResult:
    """
    Split a block's text at a character offset.

    The first half stays with the block; the second half becomes a new block
    right after it, spoken by new_speaker if given.
    """
    i, block = _find_block(result, order_index)
    if position <= 0 or position >= len(block.text_raw):
        raise BlockEditError(f"invalid split position {position} for block {order_index}")

    before = block.text_raw[:position].strip()
    after = block.text_raw[position:].strip()
    if not before or not after:
        raise BlockEditError(f"split at {position} leaves an empty block")

    speaker = (new_speaker or "").strip() or block.speaker_name
    second = replace(block, text_raw=after, speaker_name=speaker)

    blocks = list(result.line_blocks)
    blocks[i] = replace(block, text_raw=before)
    keyed = _keyed(blocks)
    keyed.insert(i + 1, ((block.order_index, 1), second))
    return _rebuild(result, keyed)


def merge_blocks(result: ParseResult, order_index: int, direction: str = "next") -> ParseResult:
    """
    Merge a block with the previous or next line block.

    Text is joined with a newline. The earlier block keeps its speaker and
    section; the later one is removed.
    """
    if direction not in ("next", "prev"):
        raise BlockEditError(f"direction must be 'next' or 'prev', got {direction!r}")

    i, _ = _find_block(result, order_index)
    j = i + 1 if direction == "next" else i - 1
    if j < 0 or j >= len(result.line_blocks):
        raise BlockEditError(f"no {direction} block to merge with block {order_index}")

    first_i, second_i = min(i, j), max(i, j)
    first = result.line_blocks[first_i]
    second = result.line_blocks[second_i]

    blocks = list(result.line_blocks)
    blocks[first_i] = replace(first, text_raw=f"{first.text_raw}\n{second.text_raw}")
    del blocks[second_i]
    return _rebuild(result, _keyed(blocks))


def delete_block(result: ParseResult, order_index: int) -> ParseResult:
    i, _ = _find_block(result, order_index)
    blocks = list(result.line_blocks)
    del blocks[i]
    return _rebuild(result, _keyed(blocks))


def rename_speaker(result: ParseResult, order_index: int, speaker_name: str) -> ParseResult:
    name = speaker_name.strip()
    if not name:
        raise BlockEditError("speaker name must not be empty")
    i, block = _find_block(result, order_index)
    blocks = list(result.line_blocks)
    blocks[i] = replace(block, speaker_name=name)
    return _rebuild(result, _keyed(blocks))
