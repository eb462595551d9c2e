"""
cleaners.py

Normalize raw play-script text extracted from a PDF.

Text coming out of a PDF is noisy in predictable ways: Windows line endings,
runs of spaces left over from column layout, running headers and footers
repeated on every page, bare page numbers, and single spoken sentences broken
over several physical lines by pagination ("soft wraps").

normalize_text() removes that noise and returns one logical line per
boundary (speaker label, inline speaker start, act/scene heading, stage
direction) and, as a rule, one merged line per dialogue run between
boundaries (see merge_soft_wraps for the exception).

Each step is exposed on its own so it can be inspected and tested:

    unify_line_endings -> collapse_whitespace -> strip_repeated_lines
        -> merge_soft_wraps

The result is a fixed point: normalize_text(normalize_text(x)) equals
normalize_text(x).
"""
from __future__ import annotations

import re
from collections import Counter
from typing import List, Set

from rehearsal_project.text.classifiers import is_boundary, is_page_number

# A non-boundary line seen this many times is a running header/footer.
REPEAT_MIN_COUNT = 3
# Only short lines are candidates; long lines are real prose.
REPEAT_MAX_LEN = 100

_SPACES_RE = re.compile(r"[ \t]+")


def unify_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def collapse_whitespace(lines: List[str]) -> List[str]:
    return [_SPACES_RE.sub(" ", ln).strip() for ln in lines]


def _is_repeat_candidate(line: str) -> bool:
    return 0 < len(line) < REPEAT_MAX_LEN and not is_boundary(line)


def find_repeated_lines(lines: List[str], min_count: int = REPEAT_MIN_COUNT) -> Set[str]:
    """
    Lines that look like running headers/footers.

    Speaker labels, headings and stage directions are never candidates: the
    same character legitimately speaks many times.
    """
    counts = Counter(ln for ln in lines if _is_repeat_candidate(ln))
    return {ln for ln, n in counts.items() if n >= min_count}


def strip_repeated_lines(lines: List[str], min_count: int = REPEAT_MIN_COUNT) -> List[str]:
    """Drop blank lines, page numbers and repeated header/footer lines."""
    repeated = find_repeated_lines(lines, min_count)
    return [
        ln for ln in lines
        if ln and not is_page_number(ln) and ln not in repeated
    ]


def merge_soft_wraps(lines: List[str]) -> List[str]:
    """
    Join each dialogue run into a single line.

    Boundary lines are emitted alone. Any other line starts a run that
    absorbs the following non-boundary lines, joined with one space.

    A run whose joined text would itself read as a boundary (a bracketed
    aside wrapped over two lines, "[Aside" + "to Hero]") is emitted as its
    separate lines instead; the block parser joins them back into one speech.
    """
    merged: List[str] = []
    i = 0
    n = len(lines)
    while i < n:
        cur = lines[i].strip()
        i += 1
        if not cur:
            continue
        if is_boundary(cur):
            merged.append(cur)
            continue

        run = [cur]
        while i < n:
            nxt = lines[i].strip()
            if not nxt:
                i += 1
                continue
            if is_boundary(nxt):
                break
            run.append(nxt)
            i += 1

        joined = " ".join(run)
        if len(run) > 1 and is_boundary(joined):
            merged.extend(run)
        else:
            merged.append(joined)
    return merged


def normalize_lines(raw_text: str, min_count: int = REPEAT_MIN_COUNT) -> List[str]:
    """
    Normalized lines of raw_text.

    Repeated-line removal runs twice: on the raw lines, then on the merged
    runs. The second sweep makes the result a fixed point, and it catches a
    header that pagination wrapped differently on each page. The cost is that
    a short speech whose merged text occurs min_count times or more is
    dropped as well, even if no single raw line of it repeated that often.
    """
    lines = collapse_whitespace(unify_line_endings(raw_text).split("\n"))
    lines = strip_repeated_lines(lines, min_count)
    merged = merge_soft_wraps(lines)
    return strip_repeated_lines(merged, min_count)


def normalize_text(raw_text: str, min_count: int = REPEAT_MIN_COUNT) -> str:
    return "\n".join(normalize_lines(raw_text, min_count))
