from rehearsal_project.text.blocks import ParserState, normalize_speaker_name, parse_blocks, step
from rehearsal_project.text.cleaners import normalize_text
from rehearsal_project.text.models import Section


def _parse(raw: str):
    return parse_blocks(normalize_text(raw))


def test_speaker_name_normalization():
    assert normalize_speaker_name("DON PEDRO:") == "Don Pedro"
    assert normalize_speaker_name("first watchman.") == "First Watchman"
    assert normalize_speaker_name("  HERO ") == "Hero"


def test_leonato_hero_scenario():
    parsed = _parse("ACT 1\nSCENE 1\nLEONATO:\nI learn in this letter...\nMore news.\nHERO.\nI think it is.\n")

    assert [(b.speaker_name, b.text_raw) for b in parsed.line_blocks] == [
        ("Leonato", "I learn in this letter... More news."),
        ("Hero", "I think it is."),
    ]
    assert parsed.sections == [Section("Act 1, Scene 1", 1, 1, 0)]
    assert all(b.section_index == 0 for b in parsed.line_blocks)
    assert set(parsed.characters) == {"Leonato", "Hero"}


def test_stage_direction_inside_speech_keeps_speaker():
    parsed = _parse("LEONATO:\nSome news\nEnter Hero\nmore news")

    assert len(parsed.stage_directions) == 1
    assert parsed.stage_directions[0].order_index == 0
    assert parsed.stage_directions[0].text_raw == "Enter Hero"
    assert len(parsed.line_blocks) == 1
    block = parsed.line_blocks[0]
    assert block.order_index == 1
    assert block.text_raw == "Some news more news"


def test_dialogue_before_any_speaker_is_dropped():
    parsed = _parse("Welcome to our play\nLEONATO:\nHello there")
    assert [b.text_raw for b in parsed.line_blocks] == ["Hello there"]


def test_no_headings_gives_default_section():
    parsed = _parse("LEONATO:\nHello there\nHERO:\nGood day")
    assert parsed.sections == [Section("Full Script", 1, 1, 0)]
    assert [b.section_index for b in parsed.line_blocks] == [0, 0]


def test_no_speakers_gives_no_blocks():
    parsed = _parse("Just some prose.\nAnd more prose.")
    assert parsed.line_blocks == []
    assert parsed.characters == []
    assert parsed.sections == [Section("Full Script", 1, 1, 0)]


def test_scene_inherits_current_act():
    parsed = _parse("ACT II\nSCENE 3\nHERO:\nYes.\nSCENE 4\nHERO:\nNo, my lord.")
    assert parsed.sections == [
        Section("Act 2, Scene 3", 2, 3, 0),
        Section("Act 2, Scene 4", 2, 4, 1),
    ]
    assert [b.section_index for b in parsed.line_blocks] == [0, 1]


def test_scene_without_act_and_act_only_headings():
    parsed = _parse("SCENE 2\nHERO:\nHello there")
    assert parsed.sections == [Section("Scene 2", None, 2, 0)]

    parsed = _parse("ACT 3\nHERO:\nHello there")
    assert parsed.sections == [Section("Full Script", 1, 1, 0)]


def test_combined_heading_sets_act_for_later_scenes():
    parsed = _parse("ACT I, SCENE 1\nHERO:\nHello there\nSCENE 2\nHERO:\nGood day")
    assert [s.title for s in parsed.sections] == ["Act 1, Scene 1", "Act 1, Scene 2"]


def test_heading_resets_speaker():
    parsed = _parse("HERO:\nHello there\nSCENE 1\nstray words\nLEONATO:\nGood day")
    assert [(b.speaker_name, b.text_raw) for b in parsed.line_blocks] == [
        ("Hero", "Hello there"),
        ("Leonato", "Good day"),
    ]
    # Flushed before any section existed.
    assert parsed.line_blocks[0].section_index is None
    assert parsed.line_blocks[1].section_index == 0


def test_inline_speaker_start():
    parsed = _parse("Messenger He is not a word.")
    assert [(b.speaker_name, b.text_raw) for b in parsed.line_blocks] == [("Messenger", "He is not a word.")]

    parsed = _parse("DON PEDRO Good Signior Leonato,\nyou are come to meet your trouble.")
    assert parsed.line_blocks[0].speaker_name == "Don Pedro"
    assert parsed.line_blocks[0].text_raw == "Good Signior Leonato, you are come to meet your trouble."


def test_empty_speech_creates_no_block():
    parsed = _parse("LEONATO:\nHERO:\nHi there")
    assert [b.speaker_name for b in parsed.line_blocks] == ["Hero"]
    assert parsed.characters == ["Hero"]
    assert parsed.line_blocks[0].order_index == 0


def test_order_indices_unique_and_increasing():
    raw = "\n".join([
        "ACT 1", "SCENE 1", "Enter Leonato and Hero",
        "LEONATO:", "I learn in this letter", "[Aside]", "that Don Pedro comes.",
        "HERO:", "My cousin means Signior Benedick.",
        "Exeunt",
        "SCENE 2", "LEONATO:", "How now, brother?",
    ])
    parsed = _parse(raw)
    indices = sorted(
        [b.order_index for b in parsed.line_blocks] + [d.order_index for d in parsed.stage_directions]
    )
    assert indices == list(range(len(indices)))
    assert [b.order_index for b in parsed.line_blocks] == sorted(b.order_index for b in parsed.line_blocks)


def test_characters_are_unique():
    parsed = _parse("HERO:\nOne\nLEONATO:\nTwo\nHERO:\nThree\nHERO.\nFour")
    assert sorted(parsed.characters) == ["Hero", "Leonato"]


def test_step_threads_state():
    state = ParserState()
    for line in ["HERO:", "Hello", "Enter Leonato"]:
        state = step(state, line)
    assert state.current_speaker == "Hero"
    assert state.current_dialogue == ["Hello"]
    assert state.order_index == 1
    state.flush()
    assert state.line_blocks[0].order_index == 1
