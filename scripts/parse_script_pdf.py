#!/usr/bin/env python
import argparse
import os

from rehearsal_project.io.pdf_text import DEFAULT_Y_TOLERANCE
from rehearsal_project.pipeline.parse_script import parse_script_pdf
from rehearsal_project.text.cleaners import REPEAT_MIN_COUNT


def main() -> None:
    """
    Command-line entry point for parsing a script PDF into rehearsal JSON.

    This script is intentionally thin: all the real work happens in
    rehearsal_project.pipeline.parse_script.parse_script_pdf().
    """
    ap = argparse.ArgumentParser(description="Parse a play script into line blocks, cues and sections.")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--pdf", help="Path to the script PDF.")
    src.add_argument("--text", help="Path to an already extracted UTF-8 text file.")
    ap.add_argument(
        "--out",
        default=None,
        help="Output JSON path. Defaults to $REHEARSAL_OUT_DIR/<input name>.json.",
    )
    ap.add_argument("--title", default=None, help="Scene title stored in meta (default: input file name).")
    ap.add_argument(
        "--y_tolerance",
        type=float,
        default=DEFAULT_Y_TOLERANCE,
        help="Max vertical distance (PDF points) for words to share a line.",
    )
    ap.add_argument(
        "--repeat_min_count",
        type=int,
        default=REPEAT_MIN_COUNT,
        help="Occurrences at which a short line is treated as a page header/footer.",
    )
    ap.add_argument(
        "--dump_lines_path",
        default=None,
        help="If set, dump the reconstructed per-page PDF lines to this JSON path.",
    )

    args = ap.parse_args()
    source = args.pdf or args.text
    out = args.out or os.path.join(
        os.environ.get("REHEARSAL_OUT_DIR", "data/parsed"),
        os.path.splitext(os.path.basename(source))[0] + ".json",
    )

    parse_script_pdf(
        pdf=args.pdf,
        text_path=args.text,
        out=out,
        scene_title=args.title,
        y_tolerance=args.y_tolerance,
        repeat_min_count=args.repeat_min_count,
        dump_lines_path=args.dump_lines_path,
    )


if __name__ == "__main__":
    main()
