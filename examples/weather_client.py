"""
Example: testing an httpx-based API client with pynock.

The WeatherClient below accepts an optional transport, the usual seam for
httpx clients. The tests at the bottom run with:

    pytest examples/weather_client.py
"""

from __future__ import annotations

import httpx
import pytest

import pynock


class WeatherClient:
    BASE_URL = "https://api.weather.example"

    def __init__(self, transport: httpx.BaseTransport | None = None) -> None:
        self._client = httpx.Client(base_url=self.BASE_URL, transport=transport, timeout=5.0)

    def current_temperature(self, city: str) -> float | None:
        try:
            response = self._client.get(f"/v1/current/{city}")
        except httpx.TransportError:
            return None
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()["temperature"]

    def close(self) -> None:
        self._client.close()


def test_current_temperature():
    transport = (
        pynock.nock("https://api.weather.example")
        .get("/v1/current/oslo")
        .reply_json(200, {"temperature": -3.5})
        .get("/v1/current/atlantis")
        .reply(404, "Not Found")
    )
    client = WeatherClient(transport=transport)

    assert client.current_temperature("oslo") == -3.5
    assert client.current_temperature("atlantis") is None
    transport.is_done()


def test_network_failure_is_reported_as_missing():
    transport = (
        pynock.nock("https://api.weather.example")
        .getf("/v1/current/%s", "paris")
        .reply_error(httpx.ConnectError("Connection refused"))
    )

    assert WeatherClient(transport=transport).current_temperature("paris") is None


def test_unexpected_request_fails():
    transport = pynock.nock("https://api.weather.example")

    with pytest.raises(pynock.NoMatchError):
        WeatherClient(transport=transport).current_temperature("rome")
