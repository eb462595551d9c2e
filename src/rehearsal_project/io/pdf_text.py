"""
pdf_text.py

Reconstruct plain text lines from a script PDF.

This is the front end of the parsing pipeline. It does no play-specific work:
it only turns the words pdfplumber finds on each page back into lines of
text, which cleaners.normalize_text() then cleans up.

How lines are rebuilt
---------------------
1) Each page's words are read with page.extract_words().
2) Words are sorted top-to-bottom, then left-to-right.
3) Words whose 'top' lies within y_tolerance of the current line's first word
   share a baseline and join that line; otherwise a new line starts.
4) Within a line, words are ordered by x0 and joined with single spaces.
5) Pages are joined by a blank line.

Nothing beyond same-baseline grouping is attempted: no column detection, no
reading-order recovery. Single-column script layouts are assumed.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pdfplumber
from tqdm import tqdm

from rehearsal_project.io.jsonio import safe_write_json

DEFAULT_Y_TOLERANCE = 3.0


def words_to_lines(words: List[Dict[str, Any]], y_tolerance: float = DEFAULT_Y_TOLERANCE) -> List[str]:
    """
    Group word boxes sharing a baseline into text lines.

    Args:
        words: Dicts with at least 'text', 'x0' and 'top' (pdfplumber's
            extract_words() output).
        y_tolerance: Max vertical distance, in PDF points, between a word's
            top and the line's top for the word to join that line.

    Returns:
        Text lines in top-to-bottom order. Empty lines are omitted.
    """
    rows: List[Dict[str, Any]] = []
    for w in sorted(words, key=lambda w: (w["top"], w["x0"])):
        if not rows or abs(w["top"] - rows[-1]["top"]) > y_tolerance:
            rows.append({"top": w["top"], "words": [w]})
        else:
            rows[-1]["words"].append(w)

    lines: List[str] = []
    for row in rows:
        row["words"].sort(key=lambda w: w["x0"])
        text = " ".join(str(w["text"]).strip() for w in row["words"] if str(w["text"]).strip())
        if text:
            lines.append(text)
    return lines


def extract_pdf_pages(
    pdf_path: str,
    *,
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
    pdf_open: Callable[..., Any] = pdfplumber.open,
    progress: bool = False,
) -> List[List[str]]:
    """Rebuild the text lines of every page, in page order."""
    pages: List[List[str]] = []
    with pdf_open(pdf_path) as pdf:
        for p in tqdm(pdf.pages, desc="pdf-pages", disable=not progress):
            pages.append(words_to_lines(p.extract_words() or [], y_tolerance))
    return pages


def extract_pdf_text(
    pdf_path: str,
    *,
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
    pdf_open: Callable[..., Any] = pdfplumber.open,
    progress: bool = False,
    dump_path: Optional[str] = None,
) -> str:
    """
    Extract the full text of a script PDF, one reconstructed line per line.

    If dump_path is set, the per-page lines are also written there as JSON
    for inspecting how the PDF was read.
    """
    pages = extract_pdf_pages(pdf_path, y_tolerance=y_tolerance, pdf_open=pdf_open, progress=progress)

    if dump_path:
        safe_write_json(
            dump_path,
            {
                "pdf": pdf_path,
                "y_tolerance": y_tolerance,
                "pages": [{"page": i, "lines": lines} for i, lines in enumerate(pages, start=1)],
            },
        )

    return "\n\n".join("\n".join(lines) for lines in pages)
