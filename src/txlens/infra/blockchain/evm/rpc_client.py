"""EVM JSON-RPC client: receipts, block headers and eth_call over a rate-limited HTTP client."""

import logging
from typing import Any

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from txlens.config import Settings
from txlens.domain.models import BlockHeader, RawLog, TransactionReceipt
from txlens.exceptions import ContractCallError, ExternalServiceError, UnsupportedChainError
from txlens.infra.blockchain.base import ChainDataSource
from txlens.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)


def _to_int(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    return int(value)


class EVMRPCClient(ChainDataSource):
    """Minimal EVM JSON-RPC client for transaction parsing."""

    def __init__(self, rpc_url: str, http_client: RateLimitedClient) -> None:
        self._rpc_url = rpc_url
        self._http = http_client
        self._request_id = 0

    @retry(
        retry=retry_if_exception_type(ExternalServiceError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _call(self, method: str, params: list) -> Any:
        """Execute a JSON-RPC call and return the result field."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        logger.debug("RPC %s %s", method, params)
        # Transport failures, non-200 statuses and non-JSON bodies arrive as ExternalServiceError
        data = await self._http.post_json(self._rpc_url, payload)
        if not isinstance(data, dict):
            raise ExternalServiceError(f"RPC returned a non-object response ({method}): {data!r}")
        if "error" in data:
            error = data["error"]
            msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            # A revert is a definitive answer from the node
            if method == "eth_call":
                raise ContractCallError(f"eth_call failed: {msg}")
            raise ExternalServiceError(f"RPC error ({method}): {msg}")

        return data.get("result")

    async def get_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        result = await self._call("eth_getTransactionReceipt", [tx_hash])
        if result is None:
            return None

        logs = [
            RawLog(
                address=(raw.get("address") or "").lower(),
                topics=[t.lower() for t in raw.get("topics", [])],
                data=raw.get("data") or "0x",
                log_index=position,
                block_log_index=_to_int(raw["logIndex"]) if raw.get("logIndex") is not None else None,
            )
            for position, raw in enumerate(result.get("logs", []))
        ]
        status = result.get("status")
        return TransactionReceipt(
            transaction_hash=result.get("transactionHash", tx_hash),
            block_number=_to_int(result["blockNumber"]),
            status=_to_int(status) if status is not None else None,
            logs=logs,
        )

    async def get_block(self, block_number: int) -> BlockHeader | None:
        result = await self._call("eth_getBlockByNumber", [hex(block_number), False])
        if result is None:
            return None
        return BlockHeader(number=_to_int(result["number"]), timestamp=_to_int(result["timestamp"]))

    async def call(self, address: str, data: str) -> str:
        result = await self._call("eth_call", [{"to": address, "data": data}, "latest"])
        if not isinstance(result, str):
            raise ContractCallError(f"eth_call to {address} returned {result!r}")
        return result


def build_data_source(chain_id: str, http_client: RateLimitedClient, settings: Settings) -> EVMRPCClient:
    """Create an RPC-backed data source for a chain. Raises UnsupportedChainError if unconfigured."""
    rpc_url = settings.get_rpc_url(chain_id)
    if not rpc_url:
        raise UnsupportedChainError(chain_id)
    return EVMRPCClient(rpc_url=rpc_url, http_client=http_client)
