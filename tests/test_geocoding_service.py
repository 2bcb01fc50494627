import threading
import time
from types import SimpleNamespace

import httpx
import pytest

from conftest import DummyGeocoder
from shuttle_directory.config import Settings
from shuttle_directory.errors import GeocodingProviderError, InputInvalid
from shuttle_directory.models.domain import GeoPoint
from shuttle_directory.services.geocoding import UNRESOLVABLE, GeocodeCache, GeocodingService, NominatimGeocoder
from shuttle_directory.services.geocoding import nominatim


def test_repeated_key_hits_geocoder_once(dummy_geocoder: DummyGeocoder):
    service = GeocodingService(dummy_geocoder)

    first = service.geocode("Altoona, PA")
    second = service.geocode("Altoona, PA")

    assert first == second == GeoPoint(40.5187, -78.3947)
    assert dummy_geocoder.calls == ["Altoona, PA"]


def test_batch_deduplicates_keys_and_preserves_all_inputs(dummy_geocoder: DummyGeocoder):
    service = GeocodingService(dummy_geocoder)

    results = service.geocode_batch(["Altoona, PA", "Miami, FL", "Altoona, PA", "Nowhere, ZZ"])

    assert list(results) == ["Altoona, PA", "Miami, FL", "Nowhere, ZZ"]
    assert results["Nowhere, ZZ"] is None
    assert sorted(dummy_geocoder.calls) == ["Altoona, PA", "Miami, FL", "Nowhere, ZZ"]


def test_unresolvable_keys_are_never_retried(dummy_geocoder: DummyGeocoder):
    cache = GeocodeCache()
    service = GeocodingService(dummy_geocoder, cache)

    assert service.geocode("Nowhere, ZZ") is None
    assert service.geocode("Nowhere, ZZ") is None

    assert dummy_geocoder.calls == ["Nowhere, ZZ"]
    assert cache.get("Nowhere, ZZ") is UNRESOLVABLE
    assert cache.stats()["unresolvable"] == 1


def test_provider_errors_mark_key_unresolvable():
    class FailingGeocoder(DummyGeocoder):
        def geocode(self, query):
            super().geocode(query)
            raise GeocodingProviderError("dummy", "boom")

    geocoder = FailingGeocoder()
    service = GeocodingService(geocoder)

    assert service.geocode_batch(["Altoona, PA", "Miami, FL"]) == {"Altoona, PA": None, "Miami, FL": None}
    assert service.geocode("Altoona, PA") is None
    assert len(geocoder.calls) == 2


def test_blank_query_is_invalid(dummy_geocoder: DummyGeocoder):
    service = GeocodingService(dummy_geocoder)

    with pytest.raises(InputInvalid):
        service.geocode("   ")
    assert dummy_geocoder.calls == []


def test_cache_claim_shares_in_flight_lookup():
    cache = GeocodeCache()

    future, owner = cache.claim("Altoona, PA")
    waiting, second_owner = cache.claim("Altoona, PA")

    assert owner is True
    assert second_owner is False
    assert waiting is future

    cache.resolve("Altoona, PA", GeoPoint(40.5187, -78.3947))
    assert waiting.result(timeout=1) == GeoPoint(40.5187, -78.3947)
    assert cache.stats()["pending"] == 0


def test_cache_first_write_wins():
    cache = GeocodeCache()
    cache.claim("Altoona, PA")

    cache.resolve("Altoona, PA", GeoPoint(40.5187, -78.3947))
    stored = cache.resolve("Altoona, PA", UNRESOLVABLE)

    assert stored == GeoPoint(40.5187, -78.3947)


def test_concurrent_requests_share_one_external_call():
    release = threading.Event()
    started = threading.Event()

    class SlowGeocoder(DummyGeocoder):
        def geocode(self, query):
            started.set()
            release.wait(timeout=5)
            return super().geocode(query)

    geocoder = SlowGeocoder()
    service = GeocodingService(geocoder)
    results = []

    def worker():
        results.append(service.geocode("Altoona, PA"))

    first = threading.Thread(target=worker)
    first.start()
    assert started.wait(timeout=5)
    second = threading.Thread(target=worker)
    second.start()
    release.set()
    first.join(timeout=5)
    second.join(timeout=5)

    assert results == [GeoPoint(40.5187, -78.3947)] * 2
    assert geocoder.calls == ["Altoona, PA"]


def test_waiting_on_stuck_lookup_times_out_as_unresolvable(dummy_geocoder: DummyGeocoder):
    cache = GeocodeCache()
    cache.claim("Altoona, PA")  # another request owns this lookup and never finishes
    service = GeocodingService(dummy_geocoder, cache, timeout_seconds=0.05)

    assert service.geocode_batch(["Altoona, PA"]) == {"Altoona, PA": None}
    assert dummy_geocoder.calls == []


def test_waits_on_several_stuck_lookups_share_one_deadline(dummy_geocoder: DummyGeocoder):
    cache = GeocodeCache()
    stuck = ["Altoona, PA", "Miami, FL", "Harrisburg, PA"]
    for key in stuck:
        cache.claim(key)
    service = GeocodingService(dummy_geocoder, cache, timeout_seconds=0.3)

    started = time.monotonic()
    results = service.geocode_batch([*stuck, "Macungie, PA"])
    elapsed = time.monotonic() - started

    assert elapsed < 0.8
    assert results == {
        "Altoona, PA": None,
        "Miami, FL": None,
        "Harrisburg, PA": None,
        "Macungie, PA": GeoPoint(40.5159, -75.5552),
    }
    assert dummy_geocoder.calls == ["Macungie, PA"]


def test_nominatim_parses_first_result():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["q"] == "Altoona, PA"
        assert request.url.params["countrycodes"] == "us"
        return httpx.Response(200, json=[{"lat": "40.5187", "lon": "-78.3947"}])

    geocoder = NominatimGeocoder(base_url="https://geocoder.test", rate_limit_seconds=0)
    geocoder._get_client = lambda: httpx.Client(transport=httpx.MockTransport(handler))

    assert geocoder.geocode("Altoona, PA") == GeoPoint(40.5187, -78.3947)


def test_nominatim_empty_result_is_no_match():
    geocoder = NominatimGeocoder(base_url="https://geocoder.test", rate_limit_seconds=0)
    geocoder._get_client = lambda: httpx.Client(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    )

    assert geocoder.geocode("Nowhere, ZZ") is None


def test_nominatim_client_error_raises_provider_error():
    geocoder = NominatimGeocoder(base_url="https://geocoder.test", rate_limit_seconds=0, max_retries=0)
    geocoder._get_client = lambda: httpx.Client(
        transport=httpx.MockTransport(lambda request: httpx.Response(403, json={"error": "forbidden"}))
    )

    with pytest.raises(GeocodingProviderError) as excinfo:
        geocoder.geocode("Altoona, PA")
    assert excinfo.value.status_code == 403


def test_nominatim_spaces_requests_by_default(monkeypatch: pytest.MonkeyPatch):
    sleeps: list[float] = []
    monkeypatch.setattr(
        nominatim, "time", SimpleNamespace(monotonic=lambda: 100.0, sleep=lambda seconds: sleeps.append(seconds))
    )
    geocoder = NominatimGeocoder(base_url="https://geocoder.test")
    geocoder._get_client = lambda: httpx.Client(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    )

    geocoder.geocode("Altoona, PA")
    geocoder.geocode("Miami, FL")

    assert Settings.model_fields["geocode_rate_limit_seconds"].default == 1.0
    assert geocoder.rate_limit_seconds == 1.0
    assert sleeps == [1.0]
