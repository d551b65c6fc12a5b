"""Key-trading app: anyone buys and sells keys issued by an account owner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .chain import Account, BankSend, Chain, MessageInfo, Response, coins, must_pay
from .errors import (
    AccountOwnerMustBeSetToIssueKey,
    CannotSellMoreThanOwned,
    InsufficientFunds,
    IssuerCannotSellLastKey,
    NotFound,
    StdError,
)
from .pricing import (
    UINT128_MAX,
    calculate_buy_price,
    calculate_sell_price,
    multiply_percentage,
)

MY_NAMESPACE = "bull-market-lab"
FRIEND_TECH_APP_NAME = "friend-tech-app"
FRIEND_TECH_APP_ID = f"{MY_NAMESPACE}:{FRIEND_TECH_APP_NAME}"
FRIEND_TECH_APP_VERSION = "0.1.0"

INSTANTIATE_REPLY_ID = 1

DEFAULT_QUERY_LIMIT = 10
MAX_QUERY_LIMIT = 30
ISSUER_FEE_PERCENTAGE = 5


def _uint128(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= UINT128_MAX:
        raise ValueError(f"{name} out of range: {value}")
    return value


def _add(a: int, b: int) -> int:
    result = a + b
    if result > UINT128_MAX:
        raise OverflowError(f"Cannot Add with {a} and {b}")
    return result


def _sub(a: int, b: int) -> int:
    if b > a:
        raise OverflowError(f"Cannot Sub with {a} and {b}")
    return a - b


@dataclass(frozen=True)
class FriendTechAppInstantiateMsg:
    username: str
    issuer_fee_collector: str
    fee_denom: str


@dataclass(frozen=True)
class FriendTechAppMigrateMsg:
    pass


@dataclass(frozen=True)
class BuyKey:
    """Buy `amount` keys issued by the account owner."""

    amount: int


@dataclass(frozen=True)
class SellKey:
    """Sell `amount` keys issued by the account owner."""

    amount: int


@dataclass(frozen=True)
class Issuer:
    pass


@dataclass(frozen=True)
class BuyKeyCost:
    amount: int


@dataclass(frozen=True)
class SellKeyCost:
    amount: int


@dataclass(frozen=True)
class Holders:
    limit: Optional[int] = None
    start_after: Optional[str] = None


@dataclass(frozen=True)
class Holding:
    holder: str


ExecuteMsg = Union[BuyKey, SellKey]
QueryMsg = Union[Issuer, BuyKeyCost, SellKeyCost, Holders, Holding]


@dataclass(frozen=True)
class IssuerResponse:
    username: str
    fee_denom: str
    issuer_fee_collector: str
    supply: int


@dataclass(frozen=True)
class BuyKeyCostResponse:
    price: int
    issuer_fee: int
    total_cost: int


@dataclass(frozen=True)
class SellKeyCostResponse:
    price: int
    issuer_fee: int
    total_cost: int


@dataclass(frozen=True)
class HoldersResponse:
    holders: list[str]


@dataclass(frozen=True)
class HoldingResponse:
    amount: int


@dataclass(frozen=True)
class Config:
    username: str
    fee_denom: str
    issuer_fee_collector: str


class FriendTechApp:
    """The key-trading app installed on one account of a chain."""

    module_id = FRIEND_TECH_APP_ID
    version = FRIEND_TECH_APP_VERSION

    def __init__(self, chain: Chain, account: Account, address: Optional[str] = None) -> None:
        self.chain = chain
        self.account = account
        self.address = address or chain.addr_make(f"{account.address}/{FRIEND_TECH_APP_ID}")
        self._config: Optional[Config] = None
        self._supply: Optional[int] = None
        self._holders: dict[str, int] = {}

    # --- state ---------------------------------------------------------

    @property
    def _loaded_config(self) -> Config:
        if self._config is None:
            raise NotFound("Config")
        return self._config

    @property
    def _loaded_supply(self) -> int:
        if self._supply is None:
            raise NotFound("Supply")
        return self._supply

    def _account_owner(self) -> str:
        if self.account.owner is None:
            raise AccountOwnerMustBeSetToIssueKey()
        return self.chain.validate_address(self.account.owner)

    def _response(self, action: str) -> Response:
        return (
            Response()
            .add_attribute("contract", self.module_id)
            .add_attribute("action", action)
        )

    # --- entry points --------------------------------------------------

    def instantiate(self, info: MessageInfo, msg: FriendTechAppInstantiateMsg) -> Response:
        owner = self._account_owner()
        collector = self.chain.validate_address(msg.issuer_fee_collector)
        self._config = Config(msg.username, msg.fee_denom, collector)
        self._supply = 1
        self._holders = {owner: 1}
        return (
            Response()
            .add_attribute("action", "instantiate")
            .add_attribute("account_owner", owner)
            .add_attribute("username", msg.username)
            .add_attribute("fee_denom", msg.fee_denom)
            .add_attribute("issuer_fee_collector", msg.issuer_fee_collector)
        )

    def execute(self, info: MessageInfo, msg: ExecuteMsg) -> Response:
        if isinstance(msg, BuyKey):
            return self._buy_key(info, msg.amount)
        if isinstance(msg, SellKey):
            return self._sell_key(info, msg.amount)
        raise TypeError(f"unknown execute message: {msg!r}")

    def query(self, msg: QueryMsg):
        """Answer a query message with its response object."""
        if isinstance(msg, Issuer):
            config = self._loaded_config
            return IssuerResponse(
                username=config.username,
                fee_denom=config.fee_denom,
                issuer_fee_collector=config.issuer_fee_collector,
                supply=self._loaded_supply,
            )
        if isinstance(msg, BuyKeyCost):
            return self.buy_key_cost(msg.amount)
        if isinstance(msg, SellKeyCost):
            return self.sell_key_cost(msg.amount)
        if isinstance(msg, Holders):
            return self._query_holders(msg.limit, msg.start_after)
        if isinstance(msg, Holding):
            holder = self.chain.validate_address(msg.holder)
            return HoldingResponse(self._holders.get(holder, 0))
        raise TypeError(f"unknown query message: {msg!r}")

    def migrate(self, msg: FriendTechAppMigrateMsg) -> Response:
        return self._response("migrate")

    def reply(self, reply_id: int) -> Response:
        if reply_id == INSTANTIATE_REPLY_ID:
            return self._response("instantiate_reply")
        raise StdError(f"Reply handler with id {reply_id} not found")

    # --- costs ---------------------------------------------------------

    def buy_key_cost(self, amount: int) -> BuyKeyCostResponse:
        """Price, issuer fee and total cost of buying `amount` keys now."""
        price = calculate_buy_price(self._loaded_supply, _uint128(amount, "amount"))
        issuer_fee = multiply_percentage(price, ISSUER_FEE_PERCENTAGE)
        return BuyKeyCostResponse(price, issuer_fee, _add(price, issuer_fee))

    def sell_key_cost(self, amount: int) -> SellKeyCostResponse:
        """Price paid out and issuer fee owed for selling `amount` keys now."""
        amount = _uint128(amount, "amount")
        price = calculate_sell_price(_sub(self._loaded_supply, amount), amount)
        issuer_fee = multiply_percentage(price, ISSUER_FEE_PERCENTAGE)
        return SellKeyCostResponse(price, issuer_fee, issuer_fee)

    # --- handlers ------------------------------------------------------

    def _buy_key(self, info: MessageInfo, amount: int) -> Response:
        buyer = info.sender
        config = self._loaded_config
        paid = must_pay(info, config.fee_denom)
        cost = self.buy_key_cost(amount)
        if cost.total_cost > paid:
            raise InsufficientFunds(required=cost.total_cost, paid=paid)

        new_supply = _add(self._loaded_supply, amount)
        new_holding = _add(self._holders.get(buyer, 0), amount)
        self._supply = new_supply
        self._holders[buyer] = new_holding

        return (
            self._response("buy_key")
            .add_message(
                BankSend(config.issuer_fee_collector, coins(cost.issuer_fee, config.fee_denom))
            )
            .add_attribute("buyer", buyer)
            .add_attribute("amount", amount)
        )

    def _sell_key(self, info: MessageInfo, amount: int) -> Response:
        issuer = self._account_owner()
        seller = info.sender
        config = self._loaded_config
        paid = must_pay(info, config.fee_denom)
        cost = self.sell_key_cost(amount)
        if cost.total_cost > paid:
            raise InsufficientFunds(required=cost.total_cost, paid=paid)

        if seller not in self._holders:
            raise CannotSellMoreThanOwned(owned=0, to_sell=amount)
        owned = self._holders[seller]
        if amount > owned:
            raise CannotSellMoreThanOwned(owned=amount, to_sell=amount)
        if seller == issuer and amount == owned:
            raise IssuerCannotSellLastKey()

        self._supply = _sub(self._loaded_supply, amount)
        if owned == amount:
            del self._holders[seller]
        else:
            self._holders[seller] = owned - amount

        return (
            self._response("sell_key")
            .add_message(
                BankSend(config.issuer_fee_collector, coins(cost.issuer_fee, config.fee_denom))
            )
            .add_message(BankSend(seller, coins(cost.price, config.fee_denom)))
            .add_attribute("seller", seller)
            .add_attribute("amount", amount)
        )

    def _query_holders(self, limit: Optional[int], start_after: Optional[str]) -> HoldersResponse:
        take = min(DEFAULT_QUERY_LIMIT if limit is None else limit, MAX_QUERY_LIMIT)
        holders = sorted(self._holders)
        if start_after is not None:
            bound = self.chain.validate_address(start_after)
            holders = [h for h in holders if h > bound]
        return HoldersResponse(holders[: max(take, 0)])