import json
import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from greenbuildings_sg.config import GEOCODE_CACHE, UNKNOWN_DISTRICT


# Cache keys
@dataclass(frozen=True)
class ByPostal:
    code: str

    def __str__(self):
        return f"POSTAL:{self.code}"


@dataclass(frozen=True)
class ByName:
    name: str  # already upper-cased

    def __str__(self):
        return f"NAME:{self.name}"


@dataclass(frozen=True)
class Missing:
    def __str__(self):
        return "MISSING"


CacheKey = Union[ByPostal, ByName, Missing]


# Lookup results
@dataclass(frozen=True)
class Found:
    lon: float
    lat: float
    district: str


@dataclass(frozen=True)
class NotFound:
    district: str = UNKNOWN_DISTRICT


GeocodeResult = Union[Found, NotFound]


def make_cache_key(postal: Optional[str], name: Optional[str]) -> CacheKey:
    p = (postal or "").strip()
    n = (name or "").strip()
    if p:
        return ByPostal(p)
    if n:
        return ByName(n.upper())
    return Missing()


def parse_key(s: str) -> Optional[CacheKey]:
    if s == "MISSING":
        return Missing()
    prefix, sep, rest = s.partition(":")
    if not sep or not rest:
        return None
    if prefix == "POSTAL":
        return ByPostal(rest)
    if prefix == "NAME":
        return ByName(rest)
    return None


def entry_to_json(result: GeocodeResult) -> dict:
    if isinstance(result, Found):
        return {"lat": result.lat, "lon": result.lon, "district": result.district}
    return {"miss": True, "district": result.district}


def entry_from_json(v) -> Optional[GeocodeResult]:
    if not isinstance(v, dict):
        return None
    if v.get("miss"):
        return NotFound(str(v.get("district") or UNKNOWN_DISTRICT))
    try:
        lat, lon = float(v["lat"]), float(v["lon"])
    except (KeyError, TypeError, ValueError):
        return None
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    return Found(lon=lon, lat=lat, district=str(v.get("district") or UNKNOWN_DISTRICT))


class GeocodeCache:
    """Persistent key -> result map, read once at start and written once at the end of a run."""

    def __init__(self, path: Union[str, Path, None] = GEOCODE_CACHE):
        self.path = Path(path) if path is not None else None
        self._entries: Dict[CacheKey, GeocodeResult] = {}

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key: CacheKey):
        return key in self._entries

    def get(self, key: CacheKey) -> Optional[GeocodeResult]:
        return self._entries.get(key)

    def store(self, key: CacheKey, result: GeocodeResult) -> GeocodeResult:
        """
        Record a lookup result. The first positive entry for a key is kept;
        returns whatever the cache holds for the key afterwards.
        """
        prev = self._entries.get(key)
        if isinstance(prev, Found):
            return prev
        self._entries[key] = result
        return result

    def load(self) -> "GeocodeCache":
        if self.path is None or not self.path.exists():
            return self
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            print(f"[warn] failed to read existing cache {self.path}: {e}", file=sys.stderr)
            return self
        if not isinstance(raw, dict):
            print(f"[warn] ignoring cache {self.path}: expected a JSON object", file=sys.stderr)
            return self
        skipped = 0
        for k, v in raw.items():
            key, entry = parse_key(k), entry_from_json(v)
            if key is None or entry is None:
                skipped += 1
                continue
            self._entries[key] = entry
        if skipped:
            print(f"[warn] skipped {skipped} unreadable cache entries in {self.path}", file=sys.stderr)
        return self

    def to_json(self) -> dict:
        return {str(k): entry_to_json(v) for k, v in self._entries.items()}

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.to_json(), indent=2, ensure_ascii=False), encoding="utf-8")
