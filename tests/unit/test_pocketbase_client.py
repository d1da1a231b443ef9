"""
Unit tests -- PocketBase client against a mocked records API.
"""
import httpx
import pytest

from src.db.pocketbase_client import PocketBaseTableClient, _literal
from src.query.builder import build_request
from src.query.descriptor import OrderBy, QueryDescriptor

RECORDS = [{"id": f"r{i}", "n": i} for i in range(25)]


class FakePocketBase:
    """Serves RECORDS with PocketBase-style pagination and records every request."""

    def __init__(self, status_code=200):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"message": "Only superusers can perform this action."})
        page = int(request.url.params.get("page", "1"))
        per_page = int(request.url.params.get("perPage", "30"))
        start = (page - 1) * per_page
        items = RECORDS[start:start + per_page]
        total_pages = -(-len(RECORDS) // per_page)
        return httpx.Response(200, json={
            "page": page, "perPage": per_page, "totalItems": len(RECORDS),
            "totalPages": total_pages, "items": items,
        })


def _client(server: FakePocketBase, token: str = "") -> PocketBaseTableClient:
    http = httpx.Client(base_url="http://pb.local", transport=httpx.MockTransport(server))
    return PocketBaseTableClient("http://pb.local", token=token, http_client=http)


def test_literals():
    assert _literal("CM 220") == "'CM 220'"
    assert _literal("it's") == "'it\\'s'"
    assert _literal(5) == "5"
    assert _literal(2.5) == "2.5"
    assert _literal(True) == "true"
    assert _literal(None) == "null"


def test_filter_sort_and_fields_params():
    server = FakePocketBase()
    d = QueryDescriptor(
        table="ccr_parameter_data",
        select="id, date",
        filters={"date": "2025-01-01", "parameter_id": ["a", "b"]},
        order_by=OrderBy(column="date", ascending=False),
        limit=10,
    )
    build_request(_client(server), d).execute()
    params = server.requests[0].url.params
    assert server.requests[0].url.path == "/api/collections/ccr_parameter_data/records"
    assert params["filter"] == "date='2025-01-01' && (parameter_id='a' || parameter_id='b')"
    assert params["sort"] == "-date"
    assert params["fields"] == "id,date"
    assert params["page"] == "1"
    assert params["perPage"] == "10"


def test_star_select_sends_no_fields():
    server = FakePocketBase()
    _client(server).select("plant_units").limit(5).execute()
    assert "fields" not in server.requests[0].url.params
    assert "filter" not in server.requests[0].url.params


def test_limit_returns_first_rows():
    rows = _client(FakePocketBase()).select("t").limit(3).execute()
    assert [r["n"] for r in rows] == [0, 1, 2]


def test_aligned_range_is_single_page():
    server = FakePocketBase()
    rows = _client(server).select("t").range(10, 14).execute()
    assert [r["n"] for r in rows] == [10, 11, 12, 13, 14]
    assert len(server.requests) == 1
    assert server.requests[0].url.params["page"] == "3"


def test_unaligned_range_spans_pages():
    server = FakePocketBase()
    rows = _client(server).select("t").range(3, 7).execute()
    assert [r["n"] for r in rows] == [3, 4, 5, 6, 7]
    assert len(server.requests) == 2


def test_range_past_end_is_short():
    rows = _client(FakePocketBase()).select("t").range(20, 29).execute()
    assert [r["n"] for r in rows] == [20, 21, 22, 23, 24]


def test_no_window_reads_everything():
    rows = _client(FakePocketBase()).select("t").execute()
    assert len(rows) == len(RECORDS)


def test_empty_membership_skips_request():
    server = FakePocketBase()
    assert _client(server).select("t").in_("id", []).execute() == []
    assert server.requests == []


def test_auth_token_header():
    server = FakePocketBase()
    _client(server, token="tok-123").select("t").limit(1).execute()
    assert server.requests[0].headers["Authorization"] == "tok-123"


def test_http_error_propagates():
    with pytest.raises(httpx.HTTPStatusError):
        _client(FakePocketBase(status_code=403)).select("t").execute()
