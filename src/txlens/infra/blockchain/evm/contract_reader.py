"""Read-only contract calls used to recover token identity that logs do not carry."""

import asyncio

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_utils import keccak

from txlens.exceptions import ContractCallError
from txlens.infra.blockchain.base import ChainDataSource


def selector(signature: str) -> str:
    """4-byte function selector as 0x-prefixed hex, e.g. selector("token0()") -> "0x0dfe1681"."""
    return "0x" + keccak(text=signature)[:4].hex()


TOKEN0 = selector("token0()")
TOKEN1 = selector("token1()")
ASSET = selector("asset()")
UNDERLYING = selector("underlying()")


class ContractReader:
    """Address getters over a ChainDataSource. Results are memoised per instance."""

    def __init__(self, data_source: ChainDataSource) -> None:
        self._source = data_source
        self._cache: dict[tuple[str, str], asyncio.Task[str]] = {}

    async def _call_address(self, contract: str, sel: str) -> str:
        key = (contract.lower(), sel)
        task = self._cache.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_address(contract, sel))
            self._cache[key] = task
        # Failures are shared too: every log of one pool sees the same answer
        return await task

    async def _fetch_address(self, contract: str, sel: str) -> str:
        result = await self._source.call(contract, sel)
        try:
            raw = bytes.fromhex(result[2:] if result.startswith("0x") else result)
            (address,) = abi_decode(["address"], raw)
        except (DecodingError, ValueError) as e:
            raise ContractCallError(f"Cannot decode address from {contract} {sel}: {result!r}") from e
        return address.lower()

    async def token_pair(self, pool: str) -> tuple[str, str]:
        """token0()/token1() of a Uniswap-style pool, queried concurrently."""
        token0, token1 = await asyncio.gather(
            self._call_address(pool, TOKEN0),
            self._call_address(pool, TOKEN1),
            return_exceptions=True,
        )
        for result in (token0, token1):
            if isinstance(result, BaseException):
                raise result
        return token0, token1

    async def asset(self, vault: str) -> str:
        """ERC-4626 asset()."""
        return await self._call_address(vault, ASSET)

    async def underlying(self, market: str) -> str:
        """Compound-style underlying()."""
        return await self._call_address(market, UNDERLYING)
