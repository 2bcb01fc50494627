import httpx
import pytest

from shuttle_directory.models.domain import GeoPoint
from shuttle_directory.services.geospatial import haversine_miles
from shuttle_directory.services.routing import service as routing_service
from shuttle_directory.services.routing.osrm_client import OSRMClient

ALTOONA = GeoPoint(40.5187, -78.3947)
HARRISBURG = GeoPoint(40.2732, -76.8867)


class DummyOSRM:
    def __init__(self, payload=None, error: Exception | None = None):
        self.payload = payload
        self.error = error
        self.coordinates = None

    def route(self, coordinates):
        self.coordinates = coordinates
        if self.error:
            raise self.error
        return self.payload


def test_routed_distance_is_preferred():
    osrm = DummyOSRM({"code": "Ok", "routes": [{"distance": 160934.4, "duration": 5400}]})

    trip = routing_service.route_distance(ALTOONA, HARRISBURG, client_factory=lambda: osrm)

    assert trip.estimated is False
    assert trip.miles == pytest.approx(100.0)
    assert trip.seconds == 5400
    assert osrm.coordinates == [(40.5187, -78.3947), (40.2732, -76.8867)]


@pytest.mark.parametrize(
    "osrm",
    [
        DummyOSRM(error=httpx.ConnectError("down")),
        DummyOSRM(error=ConnectionError("down")),
        DummyOSRM(error=ValueError("OSRM route request failed: NoRoute")),
        DummyOSRM({"code": "Ok", "routes": []}),
        DummyOSRM({"code": "Ok", "routes": [{"distance": 0, "duration": 0}]}),
    ],
)
def test_routing_failure_falls_back_to_haversine(osrm):
    trip = routing_service.route_distance(ALTOONA, HARRISBURG, client_factory=lambda: osrm)

    expected = haversine_miles(40.5187, -78.3947, 40.2732, -76.8867)
    assert trip.estimated is True
    assert trip.miles == pytest.approx(expected)
    assert trip.seconds == pytest.approx(expected / 60 * 3600)


def test_unconfigured_osrm_uses_estimate():
    trip = routing_service.route_distance(ALTOONA, HARRISBURG)

    assert trip.estimated is True


def test_osrm_client_route_request_format():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        return httpx.Response(200, json={"code": "Ok", "routes": [{"distance": 1000.0, "duration": 60.0}]})

    client = OSRMClient(base_url="http://osrm.test/", max_retries=0)
    client._get_client = lambda: httpx.Client(transport=httpx.MockTransport(handler))

    data = client.route([(40.5187, -78.3947), (40.2732, -76.8867)])

    assert seen["path"] == "/route/v1/driving/-78.3947,40.5187;-76.8867,40.2732"
    assert data["routes"][0]["distance"] == 1000.0


def test_osrm_client_requires_base_url():
    with pytest.raises(ValueError):
        OSRMClient(base_url="")


def _scripted_client(responses: list[httpx.Response]) -> tuple[OSRMClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return responses.pop(0)

    client = OSRMClient(base_url="http://osrm.test", max_retries=2, backoff_seconds=0)
    client._get_client = lambda: httpx.Client(transport=httpx.MockTransport(handler))
    return client, requests


def test_osrm_client_retries_server_errors():
    ok = httpx.Response(200, json={"code": "Ok", "routes": [{"distance": 1000.0, "duration": 60.0}]})
    client, requests = _scripted_client([httpx.Response(503), httpx.Response(429), ok])

    data = client.route([(40.5187, -78.3947), (40.2732, -76.8867)])

    assert data["code"] == "Ok"
    assert len(requests) == 3


def test_osrm_client_does_not_retry_no_route():
    client, requests = _scripted_client(
        [httpx.Response(400, json={"code": "NoRoute", "message": "Impossible route between points"})]
    )

    with pytest.raises(httpx.HTTPStatusError):
        client.route([(40.5187, -78.3947), (25.7617, -80.1918)])
    assert len(requests) == 1


def test_osrm_client_reports_unreachable_service():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = OSRMClient(base_url="http://osrm.test", max_retries=1, backoff_seconds=0)
    client._get_client = lambda: httpx.Client(transport=httpx.MockTransport(handler))

    with pytest.raises(ConnectionError):
        client.route([(40.5187, -78.3947), (40.2732, -76.8867)])
