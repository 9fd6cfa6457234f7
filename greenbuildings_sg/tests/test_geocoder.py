import pytest
from geopy.exc import GeocoderServiceError

from greenbuildings_sg.geocode_cache import ByName, ByPostal, Found, GeocodeCache, NotFound
from greenbuildings_sg.geocoder import Geocoder, build_query

from fakes import FakeGeolocator, nominatim_raw


def make_geocoder(geolocator, cache=None, **kw):
    sleeps = []
    g = Geocoder(
        cache if cache is not None else GeocodeCache(None),
        geolocator=geolocator,
        log_progress=False,
        sleep=sleeps.append,
        **kw,
    )
    return g, sleeps


@pytest.mark.parametrize(
    "postal, name, expected",
    [
        ("018956", "Marina Bay Sands", "018956, Singapore"),
        ("1234", "Marina Bay Sands", "Marina Bay Sands, Singapore"),
        ("", " Bugis Junction ", "Bugis Junction, Singapore"),
        ("", "", None),
    ],
)
def test_build_query(postal, name, expected):
    assert build_query(postal, name) == expected


def test_lookup_postal_hit_resolves_district_and_caches():
    geo = FakeGeolocator({"018956, Singapore": nominatim_raw(1.2834, 103.8607, "Marina Bay Sands, Singapore",
                                                             suburb="Marina South")})
    g, sleeps = make_geocoder(geo, delay_ms=1200)

    res = g.lookup("018956", "Marina Bay Sands")
    assert res == Found(lon=103.8607, lat=1.2834, district="Marina Bay")
    assert sleeps == [1.2]
    assert g.cache.get(ByPostal("018956")) == res

    kw = geo.kwargs[0]
    assert kw["exactly_one"] is True
    assert kw["addressdetails"] is True
    assert kw["country_codes"] == "sg"
    assert kw["language"] == "en"


def test_cache_hit_skips_network():
    cache = GeocodeCache(None)
    cache.store(ByPostal("123456"), Found(lon=103.9, lat=1.35, district="Serangoon"))
    geo = FakeGeolocator()
    g, sleeps = make_geocoder(geo, cache=cache)

    assert g.lookup("123456", "Anything") == Found(lon=103.9, lat=1.35, district="Serangoon")
    assert geo.queries == []
    assert sleeps == []
    assert g.network_calls == 0


def test_negative_cache_hit_skips_network():
    cache = GeocodeCache(None)
    cache.store(ByName("GHOST TOWER"), NotFound())
    geo = FakeGeolocator()
    g, _ = make_geocoder(geo, cache=cache)
    assert g.lookup("", "Ghost Tower") == NotFound()
    assert geo.queries == []


def test_no_result_is_cached_as_miss():
    geo = FakeGeolocator()
    g, _ = make_geocoder(geo)
    assert g.lookup("", "Ghost Tower") == NotFound()
    assert geo.queries == ["Ghost Tower, Singapore"]
    assert g.cache.get(ByName("GHOST TOWER")) == NotFound()

    # second lookup in the same run is served from the cache
    g.lookup("", "ghost tower")
    assert len(geo.queries) == 1


def test_non_six_digit_postal_keys_on_postal_but_queries_name():
    geo = FakeGeolocator({"Bugis Junction, Singapore": nominatim_raw(1.3, 103.85, "Bugis Junction, Singapore",
                                                                     suburb="Bugis")})
    g, _ = make_geocoder(geo)
    res = g.lookup("1234", "Bugis Junction")
    assert res.district == "Bugis"
    assert ByPostal("1234") in g.cache


def test_hint_name_used_for_district():
    geo = FakeGeolocator({"999999, Singapore": nominatim_raw(1.28, 103.85, "999999, Singapore")})
    g, _ = make_geocoder(geo)
    assert g.lookup("999999", "Capital Tower / Tanjong Pagar").district == "Tanjong Pagar"


def test_errors_propagate_and_nothing_is_cached():
    geo = FakeGeolocator(error=GeocoderServiceError("HTTP 503"))
    g, _ = make_geocoder(geo)
    with pytest.raises(GeocoderServiceError):
        g.lookup("123456", "X")
    assert len(g.cache) == 0


def test_nothing_to_query_is_a_miss_without_network():
    geo = FakeGeolocator()
    g, _ = make_geocoder(geo)
    assert g.lookup("", "") == NotFound()
    assert geo.queries == []


def test_progress_line(capsys):
    geo = FakeGeolocator({"123456, Singapore": nominatim_raw(1.35, 103.94, "Bedok, Singapore", town="Bedok")})
    g = Geocoder(GeocodeCache(None), geolocator=geo, delay_ms=0, log_progress=True)
    g.lookup("123456", "Bedok Mall")
    out = capsys.readouterr().out
    assert "[geocode] Bedok Mall (123456) -> Bedok in" in out
