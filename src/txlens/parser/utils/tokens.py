"""Static per-chain token metadata and exact decimal formatting."""

from pydantic import BaseModel, ConfigDict

from txlens.domain.models import RebalanceAction, TokenAmount


class TokenMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    decimals: int


# Known tokens per chain id (addresses lowercase)
TOKEN_METADATA_BY_CHAIN: dict[str, dict[str, TokenMetadata]] = {
    "8453": {
        "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913": TokenMetadata(symbol="USDC", decimals=6),
        "0xfde4c96c8593536e31f229ea8f37b2ada2699bb2": TokenMetadata(symbol="USDT", decimals=6),
        "0x4200000000000000000000000000000000000006": TokenMetadata(symbol="WETH", decimals=18),
    },
    "56": {
        "0x55d398326f99059ff775485246999027b3197955": TokenMetadata(symbol="USDT", decimals=18),
        "0x8ac76a51cc950d9822d68b83fe1ad97b32cd580d": TokenMetadata(symbol="USDC", decimals=18),
        "0x8d0d000ee44948fc98c9b98a4fa4921476f08b0d": TokenMetadata(symbol="USD1", decimals=18),
        "0xbb4cdb9cbd36b01bd1cbaebf2de08d9173bc095c": TokenMetadata(symbol="WBNB", decimals=18),
    },
}


def lookup_token(chain_id: str, address: str | None) -> TokenMetadata | None:
    if not address:
        return None
    return TOKEN_METADATA_BY_CHAIN.get(str(chain_id), {}).get(address.lower())


def lookup_token_address(symbol: str, chain_id: str) -> str | None:
    """Reverse lookup by symbol (case-insensitive)."""
    if not symbol:
        return None
    for address, meta in TOKEN_METADATA_BY_CHAIN.get(str(chain_id), {}).items():
        if meta.symbol == symbol.upper():
            return address
    return None


def format_units(raw: int, decimals: int) -> str:
    """Render a raw integer amount as a decimal string using integer arithmetic only.

    format_units(1_500_000, 6) -> "1.5", format_units(10**18, 18) -> "1.0".
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    sign = "-" if raw < 0 else ""
    whole, frac = divmod(abs(raw), 10**decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{sign}{whole}.{frac_str or '0'}"


def parse_units(text: str, decimals: int) -> int:
    """Inverse of format_units. Raises ValueError if text has more precision than decimals allow."""
    text = text.strip()
    negative = text.startswith("-")
    whole, _, frac = text.lstrip("+-").partition(".")
    frac = frac.rstrip("0")
    if len(frac) > decimals:
        raise ValueError(f"{text} has more than {decimals} decimals")
    if not (whole or frac) or not (whole + frac).isdigit():
        raise ValueError(f"Invalid amount: {text!r}")
    raw = int(whole or "0") * 10**decimals + int(frac.ljust(decimals, "0") or "0")
    return -raw if negative else raw


class TokenResolver:
    """Attaches symbol, decimals and a formatted amount to TokenAmounts of known tokens."""

    def lookup(self, chain_id: str, address: str | None) -> TokenMetadata | None:
        return lookup_token(chain_id, address)

    def enrich(self, amount: TokenAmount, chain_id: str) -> TokenAmount:
        meta = None if amount.is_placeholder else self.lookup(chain_id, amount.token)
        if meta is None:
            return amount
        return amount.model_copy(update={
            "symbol": meta.symbol,
            "decimals": meta.decimals,
            "amount_formatted": format_units(amount.raw_amount, meta.decimals),
        })

    def enrich_action(self, action: RebalanceAction, chain_id: str) -> RebalanceAction:
        return action.model_copy(update={"tokens": [self.enrich(t, chain_id) for t in action.tokens]})
