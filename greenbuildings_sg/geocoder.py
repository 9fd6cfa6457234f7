import re
import time
from typing import Callable, Optional

from geopy.geocoders import Nominatim

from greenbuildings_sg.config import (
    GEOCODE_CITY_HINT,
    GEOCODE_COUNTRY,
    GEOCODE_DELAY_MS,
    GEOCODE_LANGUAGE,
    GEOCODE_TIMEOUT,
    GEOCODE_USER_AGENT,
    LOG_PROGRESS,
    NOMINATIM_DOMAIN,
    STRICT_DISTRICTS,
)
from greenbuildings_sg.districts import pick_district
from greenbuildings_sg.geocode_cache import Found, GeocodeCache, GeocodeResult, NotFound, make_cache_key

POSTAL_PAT = re.compile(r"^\d{6}$")


def make_geolocator(domain: str = NOMINATIM_DOMAIN, timeout: float = GEOCODE_TIMEOUT) -> Nominatim:
    return Nominatim(user_agent=GEOCODE_USER_AGENT, domain=domain, timeout=timeout)


def build_query(postal: Optional[str], name: Optional[str]) -> Optional[str]:
    p = (postal or "").strip()
    n = (name or "").strip()
    if POSTAL_PAT.match(p):
        return f"{p}, {GEOCODE_CITY_HINT}"
    if n:
        return f"{n}, {GEOCODE_CITY_HINT}"
    return None


def location_to_result(loc, hint_name: str = "", strict: bool = STRICT_DISTRICTS) -> Optional[Found]:
    """geopy Location (with addressdetails) -> Found"""
    if loc is None:
        return None
    raw = loc.raw or {}
    district = pick_district(
        raw.get("address"),
        raw.get("display_name", loc.address),
        hint_name,
        strict=strict,
    )
    return Found(lon=float(raw.get("lon", loc.longitude)), lat=float(raw.get("lat", loc.latitude)), district=district)


class Geocoder:
    """
    Postal code / building name -> coordinates and district, through the cache.

    Network lookups are strictly sequential and each one is preceded by a
    ``delay_ms`` sleep to stay under Nominatim's usage policy. Errors from
    geopy are not caught here.
    """

    def __init__(
        self,
        cache: GeocodeCache,
        geolocator=None,
        delay_ms: int = GEOCODE_DELAY_MS,
        log_progress: bool = LOG_PROGRESS,
        strict_districts: bool = STRICT_DISTRICTS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cache = cache
        self.geolocator = geolocator if geolocator is not None else make_geolocator()
        self.delay_ms = max(0, int(delay_ms))
        self.log_progress = log_progress
        self.strict_districts = strict_districts
        self._sleep = sleep
        self.network_calls = 0

    def query(self, q: str, hint_name: str = "") -> Optional[Found]:
        loc = self.geolocator.geocode(
            q,
            exactly_one=True,
            addressdetails=True,
            country_codes=GEOCODE_COUNTRY,
            language=GEOCODE_LANGUAGE,
        )
        return location_to_result(loc, hint_name=hint_name, strict=self.strict_districts)

    def geocode_postal_or_name(self, postal: Optional[str], name: Optional[str]) -> Optional[Found]:
        q = build_query(postal, name)
        if q is None:
            return None
        return self.query(q, hint_name=(name or "").strip())

    def lookup(self, postal: Optional[str], name: Optional[str]) -> GeocodeResult:
        key = make_cache_key(postal, name)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        t0 = time.monotonic()
        self._sleep(self.delay_ms / 1000.0)
        self.network_calls += 1
        geo = self.geocode_postal_or_name(postal, name)
        dt = int((time.monotonic() - t0) * 1000)
        if self.log_progress:
            label = geo.district if geo else "miss"
            print(f"[geocode] {name} ({postal or 'no postal'}) -> {label} in {dt}ms")

        return self.cache.store(key, geo if geo is not None else NotFound())
