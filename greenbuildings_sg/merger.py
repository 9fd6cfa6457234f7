import json
from pathlib import Path
from typing import Dict, List, Tuple, Union

from greenbuildings_sg.config import UNKNOWN_DISTRICT, ensure_input_exists


def has_known_district(rec: dict) -> bool:
    d = rec.get("district")
    return bool(d) and d != UNKNOWN_DISTRICT


def merge_records(base: List[dict], chunk: List[dict]) -> List[dict]:
    """
    Combine two record arrays by ``id``.

    A chunk record replaces the base record only when it carries a known
    district; ids found in just one input pass through. Sorted by id.
    """
    by_id: Dict[int, dict] = {}
    for b in base:
        by_id[b["id"]] = b
    for c in chunk:
        prev = by_id.get(c["id"])
        if prev is None or has_known_district(c):
            by_id[c["id"]] = c
    return sorted(by_id.values(), key=lambda r: r["id"])


def load_records(path: Union[str, Path]) -> List[dict]:
    p = ensure_input_exists(path)
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{p}: expected a JSON array of building records")
    return data


def merge_files(base_path, chunk_path, out_path) -> Tuple[int, int, int]:
    # both inputs are parsed before anything is written
    base = load_records(base_path)
    chunk = load_records(chunk_path)
    merged = merge_records(base, chunk)
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(merged, indent=2, ensure_ascii=False), encoding="utf-8")
    return len(base), len(chunk), len(merged)
