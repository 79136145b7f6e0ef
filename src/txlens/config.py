from pydantic_settings import BaseSettings

# Chain id -> Settings attribute holding that chain's RPC URL
RPC_URL_FIELDS: dict[str, str] = {
    "1": "eth_rpc_url",
    "56": "bsc_rpc_url",
    "8453": "base_rpc_url",
    "42161": "arb_rpc_url",
    "10": "op_rpc_url",
}


class Settings(BaseSettings):
    eth_rpc_url: str = "https://eth.llamarpc.com"
    bsc_rpc_url: str = "https://bsc-dataseed.binance.org"
    base_rpc_url: str = "https://mainnet.base.org"
    arb_rpc_url: str = "https://arb1.arbitrum.io/rpc"
    op_rpc_url: str = "https://mainnet.optimism.io"
    rpc_rate_per_second: float = 10.0
    rpc_timeout: float = 30.0
    rpc_max_concurrency: int = 8  # in-flight eth_call limit per client
    default_chain_id: str = "8453"
    log_level: str = "INFO"

    @property
    def rpc_endpoints(self) -> dict[str, str]:
        endpoints = {}
        for chain_id, field in RPC_URL_FIELDS.items():
            url = getattr(self, field)
            if url:
                endpoints[chain_id] = url
        return endpoints

    def get_rpc_url(self, chain_id: str) -> str | None:
        return self.rpc_endpoints.get(str(chain_id))

    class Config:
        env_file = ".env"


settings = Settings()
