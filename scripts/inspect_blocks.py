#!/usr/bin/env python3
"""
Inspect a parsed script JSON.

This script is intentionally simple and "human-in-the-loop": after parsing a
new script, read through what the heuristics decided before anyone rehearses
with it.

- Print line blocks in order, with speaker, section and cue.
- Filter by speaker or section.
- List characters with their block counts.
- Export a compact CSV for review in a spreadsheet.

Use cases:
1) Quick quality check after parsing:
   python scripts/inspect_blocks.py --file data/parsed/much_ado.json --top 30

2) Everything one role says, with cues:
   python scripts/inspect_blocks.py --file data/parsed/much_ado.json --speaker beatrice --top 200

3) Did the speaker detection find the cast?
   python scripts/inspect_blocks.py --file data/parsed/much_ado.json --list_characters
"""

from __future__ import annotations

import argparse
import csv
import os
from collections import Counter
from typing import List, Optional

from rehearsal_project.io.jsonio import load_parse_result
from rehearsal_project.text.models import LineBlock, ParseResult


def normalize(s: str) -> str:
    """Lowercase + collapse whitespace for loose matching."""
    return " ".join(s.lower().split())


def section_title(result: ParseResult, block: LineBlock) -> str:
    if block.section_index is None or block.section_index >= len(result.sections):
        return "-"
    return result.sections[block.section_index].title


def matches_filters(
    result: ParseResult,
    block: LineBlock,
    *,
    speaker: Optional[str],
    section: Optional[str],
) -> bool:
    if speaker and normalize(speaker) not in normalize(block.speaker_name):
        return False
    if section and normalize(section) not in normalize(section_title(result, block)):
        return False
    return True


def _short(s: Optional[str], width: int = 100) -> str:
    if s is None:
        return "-"
    s = " ".join(s.split())
    return s if len(s) <= width else s[: width - 3] + "..."


def print_block(result: ParseResult, block: LineBlock, *, show_cue: bool = True) -> None:
    print("-" * 80)
    print(f"#{block.order_index}  {block.speaker_name}  |  {section_title(result, block)}")
    if show_cue:
        print(f"  cue:  {_short(block.preceding_cue_raw)}")
    print(f"  line: {_short(block.text_raw, 400)}")


def export_csv(result: ParseResult, blocks: List[LineBlock], out_csv: str) -> None:
    """Export a compact CSV summary for review."""
    os.makedirs(os.path.dirname(out_csv) or ".", exist_ok=True)
    fieldnames = ["order_index", "speaker_name", "section", "text_raw", "preceding_cue_raw"]
    with open(out_csv, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for b in blocks:
            w.writerow({
                "order_index": b.order_index,
                "speaker_name": b.speaker_name,
                "section": section_title(result, b),
                "text_raw": b.text_raw,
                "preceding_cue_raw": b.preceding_cue_raw or "",
            })


def main() -> None:
    ap = argparse.ArgumentParser(description="Inspect a parsed script JSON.")
    ap.add_argument("--file", required=True, help="Path to parsed script JSON file.")
    ap.add_argument("--top", type=int, default=20, help="Number of blocks to print after filtering.")
    ap.add_argument("--speaker", default=None, help="Filter: speaker name contains this substring (case-insensitive).")
    ap.add_argument("--section", default=None, help="Filter: section title contains this substring (case-insensitive).")
    ap.add_argument("--no_cue", action="store_true", help="Do not print cues.")
    ap.add_argument("--csv", default=None, help="If set, export filtered blocks to CSV path.")
    ap.add_argument("--list_characters", action="store_true", help="Print characters with block counts and exit.")
    ap.add_argument("--stats", action="store_true", help="Print quick parse stats and exit.")

    args = ap.parse_args()
    result = load_parse_result(args.file)

    if args.stats:
        print(f"Line blocks: {len(result.line_blocks)}")
        print(f"Stage directions: {len(result.stage_directions)}")
        print(f"Characters: {len(result.characters)}")
        print(f"Sections: {len(result.sections)}")
        for s in result.sections:
            n = sum(1 for b in result.line_blocks if b.section_index == s.order_index)
            print(f"  [{s.order_index}] {s.title}: {n} blocks")
        return

    if args.list_characters:
        c = Counter(b.speaker_name for b in result.line_blocks)
        for name, n in c.most_common():
            print(f"{name}: {n}")
        return

    filtered = [
        b for b in result.line_blocks
        if matches_filters(result, b, speaker=args.speaker, section=args.section)
    ]

    if args.csv:
        export_csv(result, filtered, args.csv)
        print(f"[ok] wrote CSV: {args.csv}")

    for b in filtered[: args.top]:
        print_block(result, b, show_cue=not args.no_cue)

    if not filtered:
        print("[info] No line blocks matched your filters.")


if __name__ == "__main__":
    main()
