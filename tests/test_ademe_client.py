import pytest
import requests

from data_adapters.ademe_client import AdemeDPEClient, TransportError


class FakeResponse:
    def __init__(self, status_code=200, payload=None, json_error=False):
        self.status_code = status_code
        self._payload = payload
        self._json_error = json_error

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json_error:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.exc:
            raise self.exc
        return self.response


PARAMS = {"size": 500, "sort": "-date_etablissement_dpe", "qs": "type_batiment:maison"}


def make_client(**kwargs):
    session = FakeSession(**kwargs)
    return AdemeDPEClient(base_url="https://example.test/api/v1", dataset_slug="dpe03existant", session=session), session


def test_search_returns_results():
    client, session = make_client(response=FakeResponse(payload={"results": [{"numero_dpe": "1"}]}))
    assert client.search(PARAMS) == [{"numero_dpe": "1"}]
    url, params, timeout = session.calls[0]
    assert url == "https://example.test/api/v1/datasets/dpe03existant/lines"
    assert params == PARAMS
    assert timeout == 30


@pytest.mark.parametrize("payload", [{}, {"results": None}, {"results": "x"}, [], None])
def test_malformed_payload_is_empty(payload):
    client, _ = make_client(response=FakeResponse(payload=payload))
    assert client.search(PARAMS) == []


def test_http_error_status():
    client, _ = make_client(response=FakeResponse(status_code=502))
    with pytest.raises(TransportError, match="HTTP 502"):
        client.search(PARAMS)


def test_network_error():
    client, _ = make_client(exc=requests.ConnectionError("connexion refusée"))
    with pytest.raises(TransportError, match="connexion refusée"):
        client.search(PARAMS)


def test_invalid_json():
    client, _ = make_client(response=FakeResponse(json_error=True))
    with pytest.raises(TransportError):
        client.search(PARAMS)


def test_lines_url_encodes_query():
    client, _ = make_client()
    url = client.lines_url(PARAMS)
    assert url.startswith("https://example.test/api/v1/datasets/dpe03existant/lines?")
    assert "size=500" in url
    assert "sort=-date_etablissement_dpe" in url
    assert "qs=type_batiment%3Amaison" in url
