import csv
import json
import re
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd

from greenbuildings_sg.config import (
    DEFAULT_BUILDING_TYPE,
    DEFAULT_COORDS,
    DEFAULT_LIMIT,
    DEFAULT_RATING,
    GEOCODE_CACHE,
    GEOCODE_DELAY_MS,
    LOG_EVERY,
    LOG_PROGRESS,
    STRICT_DISTRICTS,
    UNKNOWN_DISTRICT,
    ensure_input_exists,
)
from greenbuildings_sg.geocode_cache import Found, GeocodeCache
from greenbuildings_sg.geocoder import Geocoder
from greenbuildings_sg.models import BuildingRecord
from greenbuildings_sg.synth import (
    amenities_for_type,
    estimated_monthly_cost,
    parse_gfa,
    synth_carbon_savings,
    synth_energy_intensity,
    synth_floor_area,
    synth_occupancy_rate,
    synth_year_built,
)

SKIP_PAT = re.compile(r"skip|true|1", re.IGNORECASE)
ALL_PAT = re.compile(r"all", re.IGNORECASE)


def parse_limit(arg: Optional[str]) -> Optional[int]:
    """None means every row after the offset."""
    if arg is None or str(arg).strip() == "":
        return DEFAULT_LIMIT
    if ALL_PAT.search(str(arg)):
        return None
    n = int(str(arg).strip())
    if n < 0:
        raise ValueError(f"limit must be >= 0, got {n}")
    return n


def parse_skip(arg: Optional[str]) -> bool:
    return bool(arg) and bool(SKIP_PAT.search(str(arg)))


def parse_offset(arg: Optional[str]) -> int:
    if arg is None or str(arg).strip() == "":
        return 0
    n = int(str(arg).strip())
    if n < 0:
        raise ValueError(f"offset must be >= 0, got {n}")
    return n


def load_rows(csv_path: Union[str, Path]) -> pd.DataFrame:
    """
    Read the Green Mark CSV with every column as text; blanks stay "".
    Rows whose field count differs from the header raise ValueError.
    """
    p = ensure_input_exists(csv_path)
    with p.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if not header:
            raise ValueError(f"{p}: missing header row")
        rows = []
        for fields in reader:
            if not fields:
                continue
            if len(fields) != len(header):
                raise ValueError(
                    f"{p}: line {reader.line_num}: expected {len(header)} fields, saw {len(fields)}"
                )
            rows.append(fields)
    return pd.DataFrame(rows, columns=[c.strip() for c in header], dtype=str)


def select_rows(df: pd.DataFrame, limit: Optional[int], offset: int) -> List[Dict[str, str]]:
    end = None if limit is None else offset + limit
    return df.iloc[offset:end].to_dict("records")


def _field(row: Dict[str, str], col: str) -> str:
    return str(row.get(col) or "").strip()


def build_record(row: Dict[str, str], record_id: int, rng: np.random.Generator,
                 geocoder: Optional[Geocoder] = None) -> BuildingRecord:
    name = _field(row, "Project_Name") or f"Building {record_id}"
    postal = _field(row, "Postal_Code")
    rating = _field(row, "Rating") or DEFAULT_RATING
    project_type = _field(row, "Project_Type") or DEFAULT_BUILDING_TYPE
    expiry = _field(row, "Expiry")

    total_floor_area = synth_floor_area(project_type, parse_gfa(row.get("GFA")), rng)
    energy_intensity = synth_energy_intensity(rating, rng)
    carbon_savings = synth_carbon_savings(rating, rng)
    occupancy_rate = synth_occupancy_rate(rng)
    year_built = synth_year_built(rng)

    coords = list(DEFAULT_COORDS)
    district = UNKNOWN_DISTRICT
    if geocoder is not None:
        try:
            geo = geocoder.lookup(postal, name)
            if isinstance(geo, Found):
                coords = [geo.lon, geo.lat]
                district = geo.district or UNKNOWN_DISTRICT
        except Exception as e:
            # keep defaults
            print(f"[warn] geocode failed for {name} ({postal or 'no postal'}): {e}", file=sys.stderr)

    return BuildingRecord(
        id=record_id,
        name=name,
        address=f"Singapore {postal}".strip(),
        district=district,
        green_mark_rating=rating,
        building_type=project_type,
        energy_intensity=energy_intensity,
        total_floor_area=total_floor_area,
        year_built=year_built,
        certification_valid_until=expiry,
        estimated_monthly_cost=estimated_monthly_cost(energy_intensity, total_floor_area),
        carbon_savings=carbon_savings,
        occupancy_rate=occupancy_rate,
        amenities=amenities_for_type(project_type),
        coordinates=coords,
    )


def write_json(path: Union[str, Path], data) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def convert_csv(
    csv_path: Union[str, Path],
    out_path: Union[str, Path],
    limit: Optional[int] = DEFAULT_LIMIT,
    skip_geocode: bool = False,
    offset: int = 0,
    rng: Optional[np.random.Generator] = None,
    cache: Optional[GeocodeCache] = None,
    geolocator=None,
    delay_ms: int = GEOCODE_DELAY_MS,
    log_progress: bool = LOG_PROGRESS,
    log_every: int = LOG_EVERY,
    strict_districts: bool = STRICT_DISTRICTS,
) -> List[dict]:
    """
    CSV of Green Mark projects -> JSON array of building records.

    Rows ``[offset, offset+limit)`` are converted in order and get ids
    ``offset+1 ..``; ``limit=None`` takes every remaining row. Unless
    ``skip_geocode`` is set, each row is geocoded through the on-disk cache,
    which is saved once after the loop. Returns the records as written.
    """
    rng = rng if rng is not None else np.random.default_rng()
    rows = select_rows(load_rows(csv_path), limit, offset)

    geocoder = None
    if not skip_geocode:
        cache = cache if cache is not None else GeocodeCache(GEOCODE_CACHE).load()
        geocoder = Geocoder(
            cache,
            geolocator=geolocator,
            delay_ms=delay_ms,
            log_progress=log_progress,
            strict_districts=strict_districts,
        )

    out: List[dict] = []
    start_all = time.monotonic()
    every = max(1, int(log_every))
    for i, row in enumerate(rows):
        record_id = offset + i + 1
        if log_progress and i % every == 0:
            name = _field(row, "Project_Name") or f"Building {record_id}"
            postal = _field(row, "Postal_Code")
            print(f"[progress] {i + 1}/{len(rows)} starting: {name} ({postal or 'no postal'})")
        out.append(build_record(row, record_id, rng, geocoder).to_json())

    if log_progress:
        print(f"[progress] done in {int((time.monotonic() - start_all) * 1000)}ms")

    if geocoder is not None:
        try:
            geocoder.cache.save()
            if log_progress:
                print(f"[flush] wrote cache → {geocoder.cache.path} | rows={len(geocoder.cache)}")
        except OSError as e:
            print(f"[warn] failed to write cache {geocoder.cache.path}: {e}", file=sys.stderr)

    write_json(out_path, out)
    print(f"Wrote {len(out)} records to {out_path}")
    return out
