import pytest

from rehearsal_project.pipeline.parse_script import parse_scene_text
from rehearsal_project.text.edits import (
    BlockEditError,
    delete_block,
    merge_blocks,
    rename_speaker,
    split_block,
)

SCRIPT = "\n".join([
    "LEONATO:",
    "I learn in this letter that Don Pedro comes.",
    "Enter Messenger",
    "MESSENGER:",
    "He is very near by this.",
    "LEONATO:",
    "How many gentlemen have you lost?",
])


@pytest.fixture
def parsed():
    result = parse_scene_text(SCRIPT, "Act 1")
    # Direction was recorded before Leonato's speech was flushed.
    assert [d.order_index for d in result.stage_directions] == [0]
    assert [b.order_index for b in result.line_blocks] == [1, 2, 3]
    return result


def _summary(result):
    return [(b.order_index, b.speaker_name, b.text_raw, b.preceding_cue_raw) for b in result.line_blocks]


def test_split_keeps_speaker_and_renumbers(parsed):
    out = split_block(parsed, 1, len("I learn in this letter"))
    assert _summary(out) == [
        (1, "Leonato", "I learn in this letter", None),
        (2, "Leonato", "that Don Pedro comes.", None),
        (3, "Messenger", "He is very near by this.", "that Don Pedro comes."),
        (4, "Leonato", "How many gentlemen have you lost?", "He is very near by this."),
    ]
    assert [d.order_index for d in out.stage_directions] == [0]
    assert all(type(b.order_index) is int for b in out.line_blocks)


def test_split_with_new_speaker(parsed):
    out = split_block(parsed, 1, len("I learn in this letter"), new_speaker=" Hero ")
    assert out.line_blocks[1].speaker_name == "Hero"
    assert out.line_blocks[1].preceding_cue_raw == "I learn in this letter"
    assert out.characters == ["Leonato", "Hero", "Messenger"]


def test_split_rejects_bad_positions(parsed):
    with pytest.raises(BlockEditError):
        split_block(parsed, 1, 0)
    with pytest.raises(BlockEditError):
        split_block(parsed, 1, len(parsed.line_blocks[0].text_raw))
    with pytest.raises(BlockEditError):
        split_block(parsed, 0, 3)


def test_merge_with_next(parsed):
    out = merge_blocks(parsed, 1, "next")
    assert _summary(out) == [
        (1, "Leonato", "I learn in this letter that Don Pedro comes.\nHe is very near by this.", None),
        (2, "Leonato", "How many gentlemen have you lost?", None),
    ]
    assert out.characters == ["Leonato"]


def test_merge_with_prev_matches_merge_with_next(parsed):
    assert merge_blocks(parsed, 2, "prev") == merge_blocks(parsed, 1, "next")


def test_merge_without_neighbour_fails(parsed):
    with pytest.raises(BlockEditError):
        merge_blocks(parsed, 1, "prev")
    with pytest.raises(BlockEditError):
        merge_blocks(parsed, 3, "next")
    with pytest.raises(BlockEditError):
        merge_blocks(parsed, 1, "sideways")


def test_delete_block(parsed):
    out = delete_block(parsed, 2)
    assert _summary(out) == [
        (1, "Leonato", "I learn in this letter that Don Pedro comes.", None),
        (2, "Leonato", "How many gentlemen have you lost?", None),
    ]


def test_rename_speaker_updates_cues_and_characters(parsed):
    out = rename_speaker(parsed, 2, "  Beatrice ")
    assert out.line_blocks[1].speaker_name == "Beatrice"
    assert out.characters == ["Leonato", "Beatrice"]
    assert out.line_blocks[2].preceding_cue_raw == "He is very near by this."
    with pytest.raises(BlockEditError):
        rename_speaker(parsed, 2, "   ")


def test_edits_do_not_mutate_input(parsed):
    before = _summary(parsed)
    split_block(parsed, 1, 5)
    merge_blocks(parsed, 1)
    delete_block(parsed, 3)
    rename_speaker(parsed, 2, "Hero")
    assert _summary(parsed) == before
    assert parsed.characters == ["Leonato", "Messenger"]
