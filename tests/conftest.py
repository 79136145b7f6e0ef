import pytest

from support import FakeDataSource

from txlens.infra.blockchain.evm.contract_reader import ContractReader
from txlens.parser.registry import build_default_registry
from txlens.parser.transaction_parser import TransactionParser
from txlens.parser.utils.tokens import TokenResolver


@pytest.fixture()
def fake_source() -> FakeDataSource:
    return FakeDataSource()


@pytest.fixture()
def reader(fake_source) -> ContractReader:
    return ContractReader(fake_source)


@pytest.fixture(scope="session")
def registry():
    return build_default_registry()


@pytest.fixture()
def tx_parser(fake_source, registry) -> TransactionParser:
    return TransactionParser(
        registry=registry,
        data_source_factory=lambda chain_id: fake_source,
        token_resolver=TokenResolver(),
    )
