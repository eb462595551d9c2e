import json
import os
from typing import Any, Dict

from rehearsal_project.text.models import ParseResult


def safe_write_json(path: str, obj: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    tmp = path + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)
    os.replace(tmp, path)


def load_json(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_parse_result(path: str) -> ParseResult:
    """
    Load a parse written by pipeline.parse_script.

    Accepts either the pipeline's {"meta": ..., "data": ...} wrapper or a bare
    ParseResult dict.
    """
    obj = load_json(path)
    data = obj.get("data", obj)
    if not isinstance(data, dict) or "line_blocks" not in data:
        raise RuntimeError(f"{path} does not contain a parse result.")
    return ParseResult.from_dict(data)
