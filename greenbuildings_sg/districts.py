import re
from typing import List, Mapping, Optional

from greenbuildings_sg.config import UNKNOWN_DISTRICT

GENERIC_PAT = re.compile(
    r"^(Singapore|Republic of Singapore|Central Singapore|South East|North East|North West|South West)$",
    re.IGNORECASE,
)

KNOWN_DISTRICTS = [
    "Ang Mo Kio", "Bedok", "Bishan", "Bukit Batok", "Bukit Merah", "Bukit Panjang", "Bukit Timah",
    "Changi", "Choa Chu Kang", "Clementi", "Downtown Core", "Geylang", "Hougang", "Jurong East", "Jurong West",
    "Kallang", "Marine Parade", "Novena", "Outram", "Queenstown", "River Valley", "Rochor", "Toa Payoh",
    "Serangoon", "Sembawang", "Woodlands", "Yishun", "Tampines", "Pasir Ris", "Punggol", "Seletar", "Tuas", "Boon Lay",
    "Katong", "Siglap", "Newton", "Orchard", "Bugis", "Marina Bay", "Tanjong Pagar", "Telok Ayer", "Raffles Place",
    "Shenton Way", "Balestier", "Jalan Besar", "Lavender",
]
_KNOWN_LOWER = {d.lower() for d in KNOWN_DISTRICTS}

ALIASES = {
    "Marina": "Marina Bay",
    "Marina South": "Marina Bay",
    "Jurong": "Jurong East",
    "CBD": "Downtown Core",
    "Raffles": "Raffles Place",
    "Tanjong": "Tanjong Pagar",
}

# Nominatim address fields, most specific first
ADDRESS_FIELDS = [
    "city_district",
    "suburb",
    "neighbourhood",
    "municipality",
    "quarter",
    "borough",
    "town",
    "village",
    "county",
    "region",
    "state_district",
]

HINT_SPLIT_PAT = re.compile(r"[,&/()\-]")


def _norm(s) -> str:
    return re.sub(r"\s+", " ", str(s or "").strip())


def canonicalize(s: str) -> str:
    x = _norm(s)
    return ALIASES.get(x) or ALIASES.get(" ".join(x.split(" ")[:2])) or x


def is_generic(s: str) -> bool:
    return bool(GENERIC_PAT.match(s))


def is_known(s: str) -> bool:
    return s.lower() in _KNOWN_LOWER


def _first_known(candidates: List[str]) -> Optional[str]:
    for v in candidates:
        c = canonicalize(v)
        if is_known(c):
            return c
    return None


def address_candidates(address: Optional[Mapping]) -> List[str]:
    address = address or {}
    vals = [_norm(address.get(f)) for f in ADDRESS_FIELDS]
    return [v for v in vals if v and not is_generic(v)]


def pick_district(address: Optional[Mapping], display_name: str = "", hint_name: str = "",
                  strict: bool = False) -> str:
    """
    Resolve a canonical district from a Nominatim result.

    Address fields are tried in priority order, then the comma-separated
    parts of the display name and the building name itself. Anything that is
    not in KNOWN_DISTRICTS (after alias mapping) falls back to the first
    non-generic address field, or "Unknown" when ``strict`` is set.
    """
    pri = address_candidates(address)
    hit = _first_known(pri)
    if hit:
        return hit

    tokens = [_norm(t) for t in str(display_name or "").split(",")]
    tokens += [_norm(t) for t in HINT_SPLIT_PAT.split(str(hint_name or ""))]
    hit = _first_known([t for t in tokens if t and not is_generic(t)])
    if hit:
        return hit

    if strict or not pri:
        return UNKNOWN_DISTRICT
    return pri[0]
