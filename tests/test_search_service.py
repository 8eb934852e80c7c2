import asyncio

from data_adapters.ademe_client import TransportError
from services.filter_state import FilterState
from services.search_service import SearchService

ROWS = [
    {"numero_dpe": "1", "date_etablissement_dpe": "2024-03-01", "etiquette_dpe": "A", "type_batiment": "maison"},
    {"numero_dpe": "2", "date_etablissement_dpe": "2021-03-01", "etiquette_dpe": "B", "type_batiment": "maison"},
    {"numero_dpe": "3", "date_etablissement_dpe": "2024-02-01", "etiquette_dpe": "E", "type_batiment": "appartement"},
]


class SyncClient:
    def __init__(self, rows=None, exc=None):
        self.rows = rows
        self.exc = exc
        self.params = []

    def lines_url(self, params):
        return "https://example.test/lines?qs=" + params["qs"]

    def search(self, params):
        self.params.append(params)
        if self.exc:
            raise self.exc
        return self.rows


class GatedClient:
    """Client async dont chaque appel attend qu'on libère sa porte."""

    def __init__(self):
        self.gates = []

    async def search(self, params):
        gate = asyncio.Event()
        rows = [{"numero_dpe": params["qs"] or "all"}]
        self.gates.append(gate)
        await gate.wait()
        return rows


def test_execute_success_publishes_normalized_results():
    client = SyncClient(rows=ROWS)
    svc = SearchService(client)
    f = FilterState(building_type="maison", start_date="2023-01-01")

    out = asyncio.run(svc.execute(f))

    assert [r["numero_dpe"] for r in out] == ["1"]
    assert svc.state.results == out
    assert svc.state.loading is False
    assert svc.state.error is None
    assert svc.state.query == "type_batiment:maison AND date_etablissement_dpe:[2023-01-01 TO *]"
    assert svc.state.url.startswith("https://example.test/lines")
    assert client.params[0]["size"] == 500
    assert client.params[0]["sort"] == "-date_etablissement_dpe"


def test_transport_error_sets_message_and_empties_results():
    svc = SearchService(SyncClient(rows=ROWS))
    asyncio.run(svc.execute(FilterState()))
    assert len(svc.state.results) == 3

    svc.client = SyncClient(exc=TransportError("HTTP 500"))
    out = asyncio.run(svc.execute(FilterState()))

    assert out == []
    assert svc.state.results == []
    assert svc.state.error == "HTTP 500"
    assert svc.state.loading is False


def test_error_is_cleared_on_next_search():
    svc = SearchService(SyncClient(exc=TransportError("HTTP 503")))
    asyncio.run(svc.execute(FilterState()))
    svc.client = SyncClient(rows=[])
    asyncio.run(svc.execute(FilterState()))
    assert svc.state.error is None


def test_malformed_client_result_is_empty():
    svc = SearchService(SyncClient(rows=None))
    assert asyncio.run(svc.execute(FilterState(dpe_labels=("A",)))) == []
    assert svc.state.error is None


def test_loading_flag_during_call():
    client = GatedClient()
    svc = SearchService(client)

    async def scenario():
        task = asyncio.create_task(svc.execute(FilterState()))
        while not client.gates:
            await asyncio.sleep(0)
        assert svc.state.loading is True
        client.gates[0].set()
        await task
        assert svc.state.loading is False

    asyncio.run(scenario())


def test_stale_response_does_not_overwrite_newer_one():
    client = GatedClient()
    svc = SearchService(client)

    async def scenario():
        old = asyncio.create_task(svc.execute(FilterState(postal_code="11111")))
        while len(client.gates) < 1:
            await asyncio.sleep(0)
        new = asyncio.create_task(svc.execute(FilterState(postal_code="22222")))
        while len(client.gates) < 2:
            await asyncio.sleep(0)

        client.gates[1].set()
        await new
        assert svc.state.loading is False
        newest = list(svc.state.results)

        client.gates[0].set()
        old_rows = await old
        return newest, old_rows

    newest, old_rows = asyncio.run(scenario())

    assert "22222" in newest[0]["numero_dpe"]
    assert "11111" in old_rows[0]["numero_dpe"]
    assert svc.state.results == newest
    assert "22222" in svc.state.query
    assert svc.state.loading is False


def test_stale_response_keeps_loading_until_current_finishes():
    client = GatedClient()
    svc = SearchService(client)

    async def scenario():
        old = asyncio.create_task(svc.execute(FilterState(postal_code="11111")))
        while len(client.gates) < 1:
            await asyncio.sleep(0)
        new = asyncio.create_task(svc.execute(FilterState(postal_code="22222")))
        while len(client.gates) < 2:
            await asyncio.sleep(0)

        client.gates[0].set()
        await old
        assert svc.state.loading is True
        assert svc.state.results == []

        client.gates[1].set()
        await new
        assert svc.state.loading is False

    asyncio.run(scenario())
