from pathlib import Path
import os
import re
import sys

from dotenv import load_dotenv

load_dotenv()


def _env_num(name, default, cast=int):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        print(f"[warn] ignoring {name}={raw!r}: not a number, using {default}", file=sys.stderr)
        return default


BASE_DIR = Path(__file__).resolve().parent

# Geocode cache (flat JSON, key -> entry)
GEOCODE_CACHE = Path(os.getenv("GEOCODE_CACHE", BASE_DIR / "data" / "geocode-cache.json"))

# Nominatim
NOMINATIM_DOMAIN = os.getenv("NOMINATIM_DOMAIN", "nominatim.openstreetmap.org")
GEOCODE_USER_AGENT = "greenbuildings-sg-csv-converter/1.0"
GEOCODE_LANGUAGE = "en"
GEOCODE_COUNTRY = "sg"
GEOCODE_CITY_HINT = "Singapore"
GEOCODE_TIMEOUT = _env_num("GEOCODE_TIMEOUT", 10.0, float)
GEOCODE_DELAY_MS = _env_num("GEOCODE_DELAY_MS", 1200)

# Progress output
LOG_PROGRESS = not re.fullmatch(r"0|false", os.getenv("LOG_PROGRESS", "1"), re.IGNORECASE)
LOG_EVERY = _env_num("LOG_EVERY", 10)

# Unlisted districts resolve to "Unknown" instead of the raw address component
STRICT_DISTRICTS = bool(re.fullmatch(r"1|true|yes", os.getenv("STRICT_DISTRICTS", "0"), re.IGNORECASE))

# Importer defaults
DEFAULT_LIMIT = 300
DEFAULT_COORDS = [103.851959, 1.29027]  # CBD
UNKNOWN_DISTRICT = "Unknown"
DEFAULT_RATING = "Certified"
DEFAULT_BUILDING_TYPE = "Mixed Use"


def ensure_input_exists(path):
    """
    Basic check that an input file exists before any output is written
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Input file not found: {p}")
    return p
