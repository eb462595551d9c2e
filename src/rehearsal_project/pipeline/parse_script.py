"""
parse_script.py

End-to-end parsing of a play script into rehearsal data.

Overview
--------
parse_scene_text() is the pure core:

1) Normalize the raw text (cleaners.normalize_text).
2) Parse normalized lines into line blocks, stage directions, sections and
   characters (blocks.parse_blocks).
3) Attach preceding cues to every line block (cues.compute_cues).

It never raises on odd input: a script with no recognizable speakers yields
zero line blocks and the single default "Full Script" section.

parse_script_pdf() wraps it for files on disk: it reads a PDF (or a plain
text file), runs the core, and writes the result as JSON with a small meta
block, reporting progress as it goes.
"""
from __future__ import annotations

import os
import time
from typing import Any, Callable, Dict, Optional

import pdfplumber

from rehearsal_project.io.jsonio import safe_write_json
from rehearsal_project.io.pdf_text import DEFAULT_Y_TOLERANCE, extract_pdf_text
from rehearsal_project.text.blocks import parse_blocks
from rehearsal_project.text.cleaners import REPEAT_MIN_COUNT, normalize_text
from rehearsal_project.text.cues import compute_cues
from rehearsal_project.text.models import DEFAULT_SECTION_TITLE, ParseResult


def parse_scene_text(
    raw_text: str,
    scene_title: str = "",
    *,
    repeat_min_count: int = REPEAT_MIN_COUNT,
) -> ParseResult:
    """
    Parse raw script text into a ParseResult.

    Args:
        raw_text: Full script text, e.g. reconstructed from a PDF.
        scene_title: Title the caller stores the scene under. Not used by the
            parse itself.
        repeat_min_count: Occurrences at which a short non-boundary line is
            treated as a running header/footer and removed.

    Returns:
        ParseResult with line_blocks sorted by order_index.
    """
    normalized = normalize_text(raw_text, repeat_min_count)
    parsed = parse_blocks(normalized)
    return ParseResult(
        normalized_text=normalized,
        line_blocks=compute_cues(parsed.line_blocks),
        stage_directions=parsed.stage_directions,
        characters=parsed.characters,
        sections=parsed.sections,
    )


def _read_text_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def parse_script_pdf(
    *,
    pdf: Optional[str] = None,
    text_path: Optional[str] = None,
    out: str,
    scene_title: Optional[str] = None,
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
    repeat_min_count: int = REPEAT_MIN_COUNT,
    dump_lines_path: Optional[str] = None,
    pdf_open: Callable[..., Any] = pdfplumber.open,
) -> Dict[str, Any]:
    """
    Parse a script file and write the result to `out` as JSON.

    Exactly one of pdf / text_path must be given.

    Args:
        pdf: Path to the script PDF.
        text_path: Path to an already extracted UTF-8 text file.
        out: Output JSON path.
        scene_title: Stored in meta; defaults to the input file name.
        y_tolerance: Baseline grouping tolerance for PDF line reconstruction.
        repeat_min_count: See parse_scene_text().
        dump_lines_path: Optional path for a per-page dump of PDF lines.
        pdf_open: Replacement for pdfplumber.open (tests).

    Returns:
        The object written to `out`: {"meta": {...}, "data": ParseResult dict}.

    Raises:
        ValueError: if both or neither input is given, or the text is empty.
    """
    if (pdf is None) == (text_path is None):
        raise ValueError("pass exactly one of pdf or text_path")

    source = pdf if pdf is not None else text_path
    title = scene_title or os.path.splitext(os.path.basename(source))[0]

    t0 = time.time()
    print(f"[phase] extract text from {source}...", flush=True)
    if pdf is not None:
        raw_text = extract_pdf_text(
            pdf,
            y_tolerance=y_tolerance,
            pdf_open=pdf_open,
            progress=True,
            dump_path=dump_lines_path,
        )
    else:
        raw_text = _read_text_file(text_path)

    if not raw_text.strip():
        raise ValueError(f"no text extracted from {source}")
    print(f"[info] raw_text_chars={len(raw_text)}", flush=True)

    print("[phase] normalize + parse blocks...", flush=True)
    result = parse_scene_text(raw_text, title, repeat_min_count=repeat_min_count)

    print(
        f"[info] line_blocks={len(result.line_blocks)} "
        f"stage_directions={len(result.stage_directions)} "
        f"characters={len(result.characters)} sections={len(result.sections)}",
        flush=True,
    )
    if not result.line_blocks:
        print("[warn] no line blocks found; are speaker labels on their own lines or in caps?", flush=True)
    if len(result.sections) == 1 and result.sections[0].title == DEFAULT_SECTION_TITLE:
        print("[warn] no act/scene headings detected; using a single default section", flush=True)

    out_obj = {
        "meta": {
            "status": "complete",
            "scene_title": title,
            "source": source,
            "raw_text_chars": len(raw_text),
            "line_blocks": len(result.line_blocks),
            "stage_directions": len(result.stage_directions),
            "characters": len(result.characters),
            "sections": len(result.sections),
            "elapsed_sec": round(time.time() - t0, 2),
        },
        "data": result.to_dict(),
    }

    safe_write_json(out, out_obj)
    print(f"[ok] parsed {title!r} -> {out}", flush=True)
    return out_obj
