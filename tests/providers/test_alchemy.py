"""
Tests for the JSON-RPC client and the Alchemy Gas Manager / bundler clients.
"""

import json

import httpx
import pytest

from x402_gasless.exceptions import SponsorshipError, SubmissionError
from x402_gasless.providers import AlchemyBundler, AlchemyGasManager, JsonRpcClient, JsonRpcError
from x402_gasless.userop import validate_structure

ENTRY_POINT = "0x5FF137D4b0FDCD49DcA30c7CF57E578a026d2789"
POLICY_ID = "12345678-1234-1234-1234-123456789abc"
USER_OP_HASH = "0x" + "aa" * 32


class RecordingTransport:
    """Serves canned JSON-RPC responses and records the requests it sees"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, **response})

    def payload(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


def _client(transport: RecordingTransport) -> JsonRpcClient:
    return JsonRpcClient(http_client=httpx.AsyncClient(transport=httpx.MockTransport(transport)))


@pytest.fixture
def operation(make_record):
    return validate_structure(make_record())


class TestJsonRpcClient:
    @pytest.mark.anyio
    async def test_returns_result(self):
        transport = RecordingTransport({"result": "0x10"})
        client = _client(transport)

        assert await client.call("https://rpc.example", "eth_blockNumber", []) == "0x10"

        payload = transport.payload()
        assert payload["jsonrpc"] == "2.0"
        assert payload["method"] == "eth_blockNumber"
        assert payload["params"] == []
        await client.close()

    @pytest.mark.anyio
    async def test_request_ids_increase(self):
        transport = RecordingTransport({"result": 1}, {"result": 2})
        client = _client(transport)

        await client.call("https://rpc.example", "a", [])
        await client.call("https://rpc.example", "b", [])

        assert transport.payload(1)["id"] == transport.payload(0)["id"] + 1

    @pytest.mark.anyio
    async def test_error_object(self):
        transport = RecordingTransport(
            {"error": {"code": -32500, "message": "AA21 didn't pay prefund", "data": "0x"}}
        )
        client = _client(transport)

        with pytest.raises(JsonRpcError) as exc_info:
            await client.call("https://rpc.example", "eth_sendUserOperation", [])
        assert exc_info.value.code == -32500
        assert str(exc_info.value) == "AA21 didn't pay prefund"

    @pytest.mark.anyio
    async def test_http_error_status(self):
        transport = RecordingTransport(httpx.Response(429, text="Too Many Requests"))
        client = _client(transport)

        with pytest.raises(httpx.HTTPStatusError):
            await client.call("https://rpc.example", "eth_chainId", [])

    @pytest.mark.anyio
    async def test_non_json_body(self):
        transport = RecordingTransport(httpx.Response(200, text="<html>oops</html>"))
        client = _client(transport)

        with pytest.raises(JsonRpcError, match="Invalid JSON-RPC response"):
            await client.call("https://rpc.example", "eth_chainId", [])

    @pytest.mark.anyio
    async def test_close_is_idempotent(self):
        client = JsonRpcClient()
        await client.close()
        await client.close()


class TestAlchemyGasManager:
    @pytest.mark.anyio
    async def test_sponsor_request_shape(self, registry, operation):
        transport = RecordingTransport({"result": {"paymasterAndData": "0xabcd"}})
        manager = AlchemyGasManager(registry, _client(transport), ENTRY_POINT)

        result = await manager.sponsor(operation, POLICY_ID, "base-sepolia")

        assert result == "0xabcd"
        request = transport.requests[0]
        assert str(request.url) == registry.rpc_url("base-sepolia")
        payload = transport.payload()
        assert payload["method"] == "alchemy_requestGasAndPaymasterAndData"
        params = payload["params"][0]
        assert params["policyId"] == POLICY_ID
        assert params["entryPoint"] == ENTRY_POINT
        assert params["userOperation"]["callGasLimit"] == hex(100000)

    @pytest.mark.anyio
    async def test_result_without_paymaster_data(self, registry, operation):
        transport = RecordingTransport({"result": {"callGasLimit": "0x1"}})
        manager = AlchemyGasManager(registry, _client(transport), ENTRY_POINT)

        assert await manager.sponsor(operation, POLICY_ID, "base-sepolia") is None

    @pytest.mark.anyio
    async def test_rpc_error(self, registry, operation):
        transport = RecordingTransport({"error": {"code": -32600, "message": "policy not found"}})
        manager = AlchemyGasManager(registry, _client(transport), ENTRY_POINT)

        with pytest.raises(SponsorshipError, match="Alchemy Gas Manager error: policy not found"):
            await manager.sponsor(operation, POLICY_ID, "base-sepolia")

    @pytest.mark.anyio
    async def test_transport_error(self, registry, operation):
        transport = RecordingTransport(httpx.ConnectError("connection refused"))
        manager = AlchemyGasManager(registry, _client(transport), ENTRY_POINT)

        with pytest.raises(SponsorshipError, match="Failed to get paymaster data"):
            await manager.sponsor(operation, POLICY_ID, "base-sepolia")

    @pytest.mark.anyio
    async def test_null_result(self, registry, operation):
        transport = RecordingTransport({"result": None})
        manager = AlchemyGasManager(registry, _client(transport), ENTRY_POINT)

        with pytest.raises(SponsorshipError, match="no sponsorship data"):
            await manager.sponsor(operation, POLICY_ID, "base-sepolia")


class TestAlchemyBundler:
    @pytest.mark.anyio
    async def test_submit(self, registry, operation):
        transport = RecordingTransport({"result": USER_OP_HASH})
        bundler = AlchemyBundler(registry, _client(transport), ENTRY_POINT)

        assert await bundler.submit(operation, "base-sepolia") == USER_OP_HASH

        payload = transport.payload()
        assert payload["method"] == "eth_sendUserOperation"
        rpc_op, entry_point = payload["params"]
        assert rpc_op["sender"] == operation.sender
        assert entry_point == ENTRY_POINT

    @pytest.mark.anyio
    async def test_submit_rejected(self, registry, operation):
        transport = RecordingTransport({"error": {"code": -32500, "message": "AA25 invalid nonce"}})
        bundler = AlchemyBundler(registry, _client(transport), ENTRY_POINT)

        with pytest.raises(SubmissionError, match="Bundler error: AA25 invalid nonce"):
            await bundler.submit(operation, "base-sepolia")

    @pytest.mark.anyio
    async def test_submit_invalid_hash(self, registry, operation):
        transport = RecordingTransport({"result": None})
        bundler = AlchemyBundler(registry, _client(transport), ENTRY_POINT)

        with pytest.raises(SubmissionError, match="invalid userOp hash"):
            await bundler.submit(operation, "base-sepolia")

    @pytest.mark.anyio
    async def test_poll_receipt_pending(self, registry):
        transport = RecordingTransport({"result": None})
        bundler = AlchemyBundler(registry, _client(transport), ENTRY_POINT)

        assert await bundler.poll_receipt(USER_OP_HASH, "base-sepolia") is None
        payload = transport.payload()
        assert payload["method"] == "eth_getUserOperationReceipt"
        assert payload["params"] == [USER_OP_HASH]

    @pytest.mark.anyio
    async def test_poll_receipt_found(self, registry):
        receipt = {"userOpHash": USER_OP_HASH, "receipt": {"transactionHash": "0x" + "bb" * 32}}
        transport = RecordingTransport({"result": receipt})
        bundler = AlchemyBundler(registry, _client(transport), ENTRY_POINT)

        assert await bundler.poll_receipt(USER_OP_HASH, "base-sepolia") == receipt

    @pytest.mark.anyio
    async def test_poll_receipt_malformed(self, registry):
        transport = RecordingTransport({"result": "pending"})
        bundler = AlchemyBundler(registry, _client(transport), ENTRY_POINT)

        with pytest.raises(JsonRpcError):
            await bundler.poll_receipt(USER_OP_HASH, "base-sepolia")
