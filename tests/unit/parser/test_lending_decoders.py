"""Tests for Aave, Euler and Venus decoders: asset resolution chain and amount fields."""

from support import MARKET, USDC, USDT, VAULT, WALLET, descriptor, make_log

from txlens.domain.enums import Protocol, RebalanceActionType
from txlens.infra.blockchain.evm.contract_reader import ASSET, UNDERLYING
from txlens.parser.decoder import ActionDecoder
from txlens.parser.utils.types import EventDescriptor

AAVE_POOL = "0xa238dd80c259a72e81d7e4664a9801593f98d1c5"


class TestAave:
    async def test_supply(self, fake_source, reader):
        desc = descriptor(Protocol.AAVE, "Supply")
        log = make_log(desc, {
            "reserve": USDC, "user": WALLET, "onBehalfOf": WALLET, "amount": 5_000_000, "referralCode": 0,
        }, AAVE_POOL)

        action = await ActionDecoder().decode(log, desc, reader)

        assert action.type == RebalanceActionType.SUPPLY
        assert [(t.token, t.amount) for t in action.tokens] == [(USDC, "5000000")]
        assert action.metadata["account"] == WALLET
        assert fake_source.calls == []

    async def test_withdraw(self, reader):
        desc = descriptor(Protocol.AAVE, "Withdraw")
        log = make_log(desc, {"reserve": USDT, "user": WALLET, "to": WALLET, "amount": 42}, AAVE_POOL)
        action = await ActionDecoder().decode(log, desc, reader)
        assert action.type == RebalanceActionType.WITHDRAW
        assert [(t.token, t.amount) for t in action.tokens] == [(USDT, "42")]

    async def test_borrow_and_repay(self, reader):
        decoder = ActionDecoder()
        borrow_desc = descriptor(Protocol.AAVE, "Borrow")
        borrow = await decoder.decode(make_log(borrow_desc, {
            "reserve": USDC, "user": WALLET, "onBehalfOf": WALLET, "amount": 100,
            "interestRateMode": 2, "borrowRate": 10**25, "referralCode": 0,
        }, AAVE_POOL), borrow_desc, reader)
        repay_desc = descriptor(Protocol.AAVE, "Repay")
        repay = await decoder.decode(make_log(repay_desc, {
            "reserve": USDC, "user": WALLET, "repayer": WALLET, "amount": 101, "useATokens": False,
        }, AAVE_POOL), repay_desc, reader)

        assert borrow.type == RebalanceActionType.BORROW
        assert borrow.tokens[0].amount == "100"
        assert repay.type == RebalanceActionType.REPAY
        assert repay.tokens[0].amount == "101"


class TestEuler:
    def _deposit_log(self):
        desc = descriptor(Protocol.EULER, "Deposit")
        return desc, make_log(desc, {"sender": WALLET, "owner": WALLET, "assets": 1_000_000, "shares": 990_000}, VAULT)

    async def test_asset_from_vault_call(self, fake_source, reader):
        fake_source.set_address_result(VAULT, ASSET, USDC)
        desc, log = self._deposit_log()

        action = await ActionDecoder().decode(log, desc, reader)

        assert action.type == RebalanceActionType.SUPPLY
        assert [(t.token, t.amount) for t in action.tokens] == [(USDC, "1000000")]
        assert action.metadata["vault"] == VAULT
        assert action.contract_address == VAULT

    async def test_asset_call_failure_uses_vault_address(self, reader):
        desc, log = self._deposit_log()
        action = await ActionDecoder().decode(log, desc, reader)
        assert action.tokens[0].token == VAULT
        assert action.tokens[0].amount == "1000000"

    async def test_withdraw_amount_is_assets(self, fake_source, reader):
        fake_source.set_address_result(VAULT, ASSET, USDC)
        desc = descriptor(Protocol.EULER, "Withdraw")
        log = make_log(desc, {
            "sender": WALLET, "receiver": WALLET, "owner": WALLET, "assets": 1_050_000, "shares": 990_000,
        }, VAULT)
        action = await ActionDecoder().decode(log, desc, reader)
        assert action.type == RebalanceActionType.WITHDRAW
        assert action.tokens[0].amount == "1050000"

    async def test_asset_and_amount_taken_from_event_args(self, fake_source, reader):
        desc = EventDescriptor.from_abi(
            Protocol.EULER, RebalanceActionType.SUPPLY,
            "Deposit(address indexed asset,address indexed owner,uint256 amount)",
        )
        log = make_log(desc, {"asset": USDT, "owner": WALLET, "amount": 42}, VAULT)

        action = await ActionDecoder().decode(log, desc, reader)

        assert [(t.token, t.amount) for t in action.tokens] == [(USDT, "42")]
        assert action.metadata["shares"] == "0"
        assert fake_source.calls == []

    async def test_event_without_amount_field_is_dropped(self, fake_source, reader, caplog):
        fake_source.set_address_result(VAULT, ASSET, USDC)
        desc = EventDescriptor.from_abi(
            Protocol.EULER, RebalanceActionType.SUPPLY,
            "Deposit(address indexed sender,address indexed owner,uint256 value,uint256 shares)",
        )
        log = make_log(desc, {"sender": WALLET, "owner": WALLET, "value": 5, "shares": 4}, VAULT)

        assert await ActionDecoder().decode(log, desc, reader) is None
        assert "no assets/amount field" in caplog.text


class TestVenus:
    async def test_mint_with_underlying(self, fake_source, reader):
        fake_source.set_address_result(MARKET, UNDERLYING, USDT)
        desc = descriptor(Protocol.VENUS, "Mint")
        log = make_log(desc, {"minter": WALLET, "mintAmount": 10**18, "mintTokens": 4 * 10**9}, MARKET)

        action = await ActionDecoder().decode(log, desc, reader)

        assert action.type == RebalanceActionType.SUPPLY
        assert [(t.token, t.amount) for t in action.tokens] == [(USDT, str(10**18))]
        assert action.metadata["market"] == MARKET

    async def test_native_market_uses_market_address(self, reader):
        desc = descriptor(Protocol.VENUS, "Redeem")
        log = make_log(desc, {"redeemer": WALLET, "redeemAmount": 77, "redeemTokens": 3}, MARKET)
        action = await ActionDecoder().decode(log, desc, reader)
        assert action.type == RebalanceActionType.WITHDRAW
        assert [(t.token, t.amount) for t in action.tokens] == [(MARKET, "77")]

    async def test_repay_borrow_amount_field(self, fake_source, reader):
        fake_source.set_address_result(MARKET, UNDERLYING, USDT)
        desc = descriptor(Protocol.VENUS, "RepayBorrow")
        log = make_log(desc, {
            "payer": WALLET, "borrower": WALLET, "repayAmount": 500, "accountBorrows": 1000, "totalBorrows": 10**9,
        }, MARKET)
        action = await ActionDecoder().decode(log, desc, reader)
        assert action.type == RebalanceActionType.REPAY
        assert action.tokens[0].amount == "500"
        assert action.metadata["account"] == WALLET
