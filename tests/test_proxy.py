import aiohttp
import pytest

from calltape import ANY, in_order, never, verify, verify_no_interaction
from calltape.proxy import HttpDouble


@pytest.mark.asyncio
async def test_requests_are_recorded(calltape):
    async with HttpDouble(calltape, "billing") as billing:
        async with aiohttp.ClientSession() as client:
            async with client.post(
                f"{billing.base_url}/v1/charges", json={"amount": 2000}
            ) as resp:
                assert resp.status == 200
                assert await resp.json() == {}
            async with client.get(
                f"{billing.base_url}/v1/charges", params={"limit": "5"}
            ) as resp:
                assert resp.status == 200

    verify(billing).request("POST", "/v1/charges", {"amount": 2000})
    verify(billing).request("GET", "/v1/charges", {"limit": "5"})
    verify(billing, never()).request("DELETE", ANY, ANY)


@pytest.mark.asyncio
async def test_text_bodies_are_kept_as_text(calltape):
    async with HttpDouble(calltape, "hook") as hook:
        async with aiohttp.ClientSession() as client:
            async with client.put(f"{hook.base_url}/raw", data="not json") as resp:
                assert resp.status == 200

    verify(hook).request("PUT", "/raw", "not json")


@pytest.mark.asyncio
async def test_http_calls_share_ordering_with_mocks(calltape):
    audit = calltape.mock("audit")
    async with HttpDouble(calltape, "api") as api:
        audit.log("start")
        async with aiohttp.ClientSession() as client:
            async with client.post(f"{api.base_url}/jobs", json={"id": 1}):
                pass
        audit.log("done")

    in_order(
        verify(audit).log("start"),
        verify(api).request("POST", "/jobs", ANY),
        verify(audit).log("done"),
    )


@pytest.mark.asyncio
async def test_unused_double_has_no_interaction(calltape):
    async with HttpDouble(calltape, "idle") as idle:
        assert idle.port != 0
        assert idle.base_url.startswith("http://127.0.0.1:")

    verify_no_interaction(idle)


@pytest.mark.asyncio
async def test_undecodable_bodies_are_recorded_as_bytes(calltape):
    async with HttpDouble(calltape, "blobs") as blobs:
        async with aiohttp.ClientSession() as client:
            async with client.post(f"{blobs.base_url}/upload", data=b"\xff\xfe\x00") as resp:
                assert resp.status == 200

    verify(blobs).request("POST", "/upload", b"\xff\xfe\x00")
