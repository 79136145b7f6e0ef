from collections.abc import Callable

from dependency_injector import containers, providers

from txlens.config import Settings
from txlens.infra.blockchain.base import ChainDataSource
from txlens.infra.blockchain.evm.rpc_client import build_data_source
from txlens.infra.http.rate_limited_client import RateLimitedClient
from txlens.parser.registry import build_default_registry
from txlens.parser.transaction_parser import TransactionParser
from txlens.parser.utils.tokens import TokenResolver


def make_data_source_factory(
    http_client: RateLimitedClient, settings: Settings
) -> Callable[[str], ChainDataSource]:
    """chain id -> data source, one client per chain sharing the HTTP client."""
    sources: dict[str, ChainDataSource] = {}

    def factory(chain_id: str) -> ChainDataSource:
        chain_id = str(chain_id)
        if chain_id not in sources:
            sources[chain_id] = build_data_source(chain_id, http_client, settings)
        return sources[chain_id]

    return factory


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.rpc_rate_per_second,
        timeout=settings.provided.rpc_timeout,
        max_concurrency=settings.provided.rpc_max_concurrency,
    )

    data_source_factory = providers.Singleton(
        make_data_source_factory,
        http_client=http_client,
        settings=settings,
    )

    event_registry = providers.Singleton(build_default_registry)

    token_resolver = providers.Singleton(TokenResolver)

    transaction_parser = providers.Factory(
        TransactionParser,
        registry=event_registry,
        data_source_factory=data_source_factory,
        token_resolver=token_resolver,
    )
