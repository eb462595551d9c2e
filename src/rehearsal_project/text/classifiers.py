"""
classifiers.py

Line-level predicates for play scripts.

Every function here looks at ONE line of text and answers a single question:
is this a speaker label, a stage direction, an act/scene heading, a page
number, or a speaker label glued to the start of its dialogue?

They are total functions: any string in, a bool / record / None out. The
normalizer (cleaners.py) and the block parser (blocks.py) both build on them,
so a change here moves both the boundaries of soft-wrap merging and the
attribution of dialogue.

Speaker detection is heuristic and deliberately conservative:

    LEONATO.            -> label (all caps)
    DON PEDRO:          -> label (all caps, several words)
    Messenger           -> label (known role word)
    Second Watchman     -> label (ordinal + capitalized word)
    Servant II          -> label (role + numeral)
    Good morning to you -> NOT a label (ordinary title-case sentence)
"""
from __future__ import annotations

import re
from typing import Optional

from rehearsal_project.text.models import (
    ClassifiedLine,
    Heading,
    InlineSpeakerStart,
    LineKind,
)

SPEAKER_MIN_LEN = 2
SPEAKER_MAX_LEN = 30

# Title-case role names that appear as speakers without being proper names.
KNOWN_ROLE_WORDS = frozenset({
    "Messenger", "Servant", "Attendant", "Officer", "Guard", "Watchman",
    "Soldier", "Gentleman", "Lady", "Lord", "Duke", "King", "Queen", "Prince",
    "Princess", "Nurse", "Friar", "Boy", "Girl", "Man", "Woman", "Chorus",
    "Prologue", "Epilogue", "Captain", "Page", "Clown", "Citizen", "Musician",
    "Sailor", "Porter", "Herald", "Doctor", "Ghost", "Witch", "Jailer",
})
ORDINAL_WORDS = ("First", "Second", "Third")

HEADING_PREFIXES = ("ACT", "SCENE", "TITLE")
DIRECTION_PREFIXES = ("ENTER", "EXIT", "EXEUNT", "RE-ENTER")
# A speaker label may never start like a heading or an entrance/exit.
NON_SPEAKER_PREFIXES = ("ACT", "SCENE") + DIRECTION_PREFIXES

NUMBER_WORDS = {"ONE": 1, "TWO": 2, "THREE": 3, "FOUR": 4, "FIVE": 5}
ROMAN_VALUES = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100}

_DIGITS_RE = re.compile(r"^\d+$")
_UPPER_LETTERS_RE = re.compile(r"^[A-Z]+$")
_UPPER_WORD_RE = re.compile(r"^[A-Z'\-]+$")
_LABEL_NOISE_RE = re.compile(r"[\s'\-]")
_TRAILING_PUNCT_RE = re.compile(r"[.:]$")
_ASIDE_RE = re.compile(r"\[.*Aside.*\]", re.IGNORECASE)

# Headings are matched on the upper-cased line; numerals are validated later.
_ACT_SCENE_RE = re.compile(r"^ACT\s+(?P<act>[A-Z0-9]+)\s*[,:]?\s*SCENE\s+(?P<scene>[A-Z0-9]+)\b")
_ACT_RE = re.compile(r"^ACT\s+(?P<act>[A-Z0-9]+)\b")
_SCENE_RE = re.compile(r"^SCENE\s+(?P<scene>[A-Z0-9]+)\b")

_ROLE_ALT = "|".join(sorted(KNOWN_ROLE_WORDS, key=len, reverse=True))
_ORDINAL_ALT = "|".join(ORDINAL_WORDS)
_ORDINAL_LABEL_RE = re.compile(rf"^(?:{_ORDINAL_ALT})\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?$")
_NUMBERED_ROLE_RE = re.compile(rf"^(?:{_ROLE_ALT})\s+(?:\d+|[IVXLC]+)$")
_INLINE_ROLE_RE = re.compile(
    rf"^(?P<label>(?:(?:{_ORDINAL_ALT})\s+)?(?:{_ROLE_ALT})(?:\s+(?:\d+|[IVXLC]+))?)[.:]?\s+(?P<rest>(?![a-z])\S.*)$"
)


def clean_spaces(s: str) -> str:
    return re.sub(r"[ \t]+", " ", s).strip()


def is_page_number(line: str) -> bool:
    return bool(_DIGITS_RE.match(line.strip()))


def is_act_or_scene_heading(line: str) -> bool:
    return line.strip().upper().startswith(HEADING_PREFIXES)


def parse_roman(token: str) -> int:
    """
    Greedy subtractive roman numeral parse over I/V/X/L/C.

    Returns 0 for anything that is not made only of those letters.
    """
    t = token.upper()
    if not t or any(c not in ROMAN_VALUES for c in t):
        return 0
    total = 0
    for i, c in enumerate(t):
        value = ROMAN_VALUES[c]
        if i + 1 < len(t) and value < ROMAN_VALUES[t[i + 1]]:
            total -= value
        else:
            total += value
    return total


def parse_number_token(token: str) -> Optional[int]:
    """
    Arabic digits, then roman numerals, then ONE..FIVE.

    Returns None for a token that is none of these, so callers can tell an
    unreadable numeral apart from a real number.
    """
    t = token.strip().upper()
    if _DIGITS_RE.match(t):
        return int(t)
    roman = parse_roman(t)
    if roman > 0:
        return roman
    return NUMBER_WORDS.get(t)


def parse_act_scene_heading(line: str) -> Optional[Heading]:
    """
    Parse "ACT I, SCENE 2", "ACT 3" or "SCENE IV" style headings.

    Patterns are tried in that order. A pattern whose numeral does not parse
    is skipped, so "ACT II, SCENE X1" still yields Act 2 and "ACT X1" yields
    None rather than an act numbered 0.
    """
    up = clean_spaces(line).upper()

    m = _ACT_SCENE_RE.match(up)
    if m:
        act = parse_number_token(m.group("act"))
        scene = parse_number_token(m.group("scene"))
        if act is not None and scene is not None:
            return Heading(title=f"Act {act}, Scene {scene}", act_number=act, scene_number=scene)

    m = _ACT_RE.match(up)
    if m:
        act = parse_number_token(m.group("act"))
        if act is not None:
            return Heading(title=f"Act {act}", act_number=act, scene_number=None)

    m = _SCENE_RE.match(up)
    if m:
        scene = parse_number_token(m.group("scene"))
        if scene is not None:
            return Heading(title=f"Scene {scene}", act_number=None, scene_number=scene)

    return None


def is_stage_direction(line: str) -> bool:
    t = line.strip()
    if not t:
        return False
    if t.upper().startswith(DIRECTION_PREFIXES):
        return True
    if (t.startswith("[") and t.endswith("]")) or (t.startswith("(") and t.endswith(")")):
        return True
    return bool(_ASIDE_RE.search(t))


def _is_known_role(candidate: str) -> bool:
    if candidate in KNOWN_ROLE_WORDS:
        return True
    if _ORDINAL_LABEL_RE.match(candidate):
        return True
    return bool(_NUMBERED_ROLE_RE.match(candidate))


def is_speaker_label(line: str) -> bool:
    """
    True for a line that holds only a speaker name, e.g. "LEONATO." or
    "First Watchman:".
    """
    t = line.strip()
    if not t:
        return False
    candidate = _TRAILING_PUNCT_RE.sub("", t).strip()
    if len(candidate) < SPEAKER_MIN_LEN or len(candidate) > SPEAKER_MAX_LEN:
        return False
    if candidate.upper().startswith(NON_SPEAKER_PREFIXES):
        return False

    cleaned = _LABEL_NOISE_RE.sub("", candidate)
    if cleaned and _UPPER_LETTERS_RE.match(cleaned):
        return True
    return _is_known_role(candidate)


def _is_upper_label(label: str) -> bool:
    cleaned = _LABEL_NOISE_RE.sub("", _TRAILING_PUNCT_RE.sub("", label))
    if not cleaned or not _UPPER_LETTERS_RE.match(cleaned):
        return False
    if is_act_or_scene_heading(label) or is_stage_direction(label):
        return False
    return is_speaker_label(label)


def _parse_upper_inline(t: str) -> Optional[InlineSpeakerStart]:
    words = t.split()
    # Longest all-caps prefix first, so "DON PEDRO Good morrow" keeps both words.
    for k in range(len(words) - 1, 0, -1):
        head = words[:k]
        last = _TRAILING_PUNCT_RE.sub("", head[-1])
        if not all(_UPPER_WORD_RE.match(w) for w in head[:-1] + [last]):
            continue
        # A trailing lone "I", "A" or "O" belongs to the dialogue.
        if k > 1 and len(last) == 1:
            continue
        label = " ".join(head[:-1] + [last])
        if not _is_upper_label(label):
            continue
        return InlineSpeakerStart(speaker_label=label, rest=" ".join(words[k:]))
    return None


def parse_inline_speaker_start(line: str) -> Optional[InlineSpeakerStart]:
    """
    Detect a speaker label and dialogue sharing one physical line.

    Only two shapes are accepted:
      1) all-caps label words: "LEONATO I learn in this letter..."
      2) a known role word, optionally ordinal-prefixed or numbered:
         "Messenger He is not a word.", "Servant 2 Go, fetch him hither."

    Generic title-case starts ("Good morning to you") never match, and a role
    word followed by lower-case text ("Man is a giddy thing") is read as
    dialogue. A trailing numeral joins the label only if the text after it
    does not start lower-case, so "Servant I pray you" is spoken by "Servant".
    """
    t = clean_spaces(line)
    if not t:
        return None

    found = _parse_upper_inline(t)
    if found is not None:
        return found

    m = _INLINE_ROLE_RE.match(t)
    if m and not m.group("rest")[0].islower():
        return InlineSpeakerStart(speaker_label=m.group("label"), rest=m.group("rest").strip())
    return None


def is_boundary(line: str) -> bool:
    """Lines that never merge into a soft-wrapped dialogue run."""
    return (
        is_speaker_label(line)
        or parse_inline_speaker_start(line) is not None
        or is_act_or_scene_heading(line)
        or is_stage_direction(line)
    )


def classify_line(line: str) -> ClassifiedLine:
    """
    Classify one normalized line, in block-parser priority order:
    heading, stage direction, speaker label, inline speaker start, dialogue.
    """
    t = line.strip()
    if is_act_or_scene_heading(t):
        return ClassifiedLine(LineKind.HEADING, t, heading=parse_act_scene_heading(t))
    if is_stage_direction(t):
        return ClassifiedLine(LineKind.STAGE_DIRECTION, t)
    if is_speaker_label(t):
        return ClassifiedLine(LineKind.SPEAKER_LABEL, t)
    inline = parse_inline_speaker_start(t)
    if inline is not None:
        return ClassifiedLine(LineKind.INLINE_SPEAKER_START, t, inline=inline)
    return ClassifiedLine(LineKind.DIALOGUE, t)
