import asyncio

import httpx
import pytest

from clinicsheets.fetch import FetchError, SheetFetcher

SHEET_URL = "https://sheets.example/pub?output=csv"


def run(coro):
    return asyncio.run(coro)


def test_fetch_records_adds_cache_buster():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, content=b"Name,Contact\nDr. Ada,555\n")

    async def scenario():
        fetcher = SheetFetcher(transport=httpx.MockTransport(handler))
        try:
            return await fetcher.fetch_records(SHEET_URL)
        finally:
            await fetcher.aclose()

    assert run(scenario()) == [{"name": "Dr. Ada", "contact": "555"}]
    assert seen[0].params["output"] == "csv"
    assert seen[0].params["timestamp"].isdigit()


def test_http_error_status_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, content=b"not found")

    async def scenario():
        fetcher = SheetFetcher(transport=httpx.MockTransport(handler))
        try:
            await fetcher.fetch_text(SHEET_URL)
        finally:
            await fetcher.aclose()

    with pytest.raises(FetchError) as excinfo:
        run(scenario())
    assert "404" in str(excinfo.value)
    assert excinfo.value.url == SHEET_URL


def test_transport_error_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        fetcher = SheetFetcher(transport=httpx.MockTransport(handler))
        try:
            await fetcher.fetch_records(SHEET_URL)
        finally:
            await fetcher.aclose()

    with pytest.raises(FetchError) as excinfo:
        run(scenario())
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_cache_buster_keeps_every_existing_param():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, content=b"Name\nDr. Ada\n")

    async def scenario():
        fetcher = SheetFetcher(transport=httpx.MockTransport(handler))
        try:
            await fetcher.fetch_text("https://sheets.example/pub?gid=7&single=true&output=csv")
        finally:
            await fetcher.aclose()

    run(scenario())
    params = seen[0].params
    assert params["gid"] == "7"
    assert params["single"] == "true"
    assert params["output"] == "csv"
    assert "timestamp" in params
    assert seen[0].path == "/pub"
