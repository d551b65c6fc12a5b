import pytest

from keyboard_qa.chain import (
    Account,
    BankSend,
    Chain,
    Coin,
    MessageInfo,
    Response,
    coins,
    must_pay,
    nonpayable,
)
from keyboard_qa.errors import PaymentError, StdError

DENOM = "ucosm"


class _Splitter:
    """Pays half of what it receives on to a fixed address."""

    def __init__(self, chain, payout):
        self.address = chain.addr_make("splitter")
        self.payout = payout
        self.creator = None

    def instantiate(self, info, msg):
        self.creator = info.sender
        return Response().add_attribute("action", msg)

    def execute(self, info, msg):
        if msg == "fail":
            raise StdError("refused")
        if msg == "overdraw":
            return Response().add_message(BankSend(self.payout, coins(10**6, DENOM)))
        paid = must_pay(info, DENOM)
        return (
            Response()
            .add_message(BankSend(self.payout, coins(paid // 2, DENOM)))
            .add_attribute("paid", paid)
        )


@pytest.fixture
def chain():
    return Chain()


@pytest.fixture
def user(chain):
    return chain.addr_make("user1")


def test_coins_builds_single_coin():
    assert coins(5, DENOM) == [Coin(DENOM, 5)]


def test_must_pay_returns_amount():
    assert must_pay(MessageInfo("a", coins(42, DENOM)), DENOM) == 42


@pytest.mark.parametrize(
    "funds, message",
    [
        ((), "No funds sent"),
        (coins(0, DENOM), "No funds sent"),
        ([Coin(DENOM, 1), Coin("uatom", 1)], "Sent more than one denomination"),
        (coins(3, "uatom"), "Must send 'ucosm'"),
    ],
)
def test_must_pay_errors(funds, message):
    with pytest.raises(PaymentError) as info:
        must_pay(MessageInfo("a", funds), DENOM)
    assert str(info.value) == message


def test_nonpayable():
    assert nonpayable(MessageInfo("a")) is None
    with pytest.raises(PaymentError) as info:
        nonpayable(MessageInfo("a", coins(1, DENOM)))
    assert str(info.value) == "This message does no accept funds"


def test_response_chains():
    response = Response().add_attribute("amount", 10).add_message(BankSend("x", coins(1, DENOM)))
    assert response.attributes == [("amount", "10")]
    assert response.messages == [BankSend("x", (Coin(DENOM, 1),))]


def test_addr_make_is_deterministic_and_valid(chain):
    address = chain.addr_make("user1")
    assert address == Chain().addr_make("user1")
    assert address != chain.addr_make("user2")
    assert address.startswith("mock1")
    assert chain.validate_address(address) == address


@pytest.mark.parametrize(
    "prefix, address",
    [("a", "a12uel5l"), ("abcdef", "abcdef1qpzry9x8gf2tvdw0s3jn54khce6mua7lmqqqxw")],
)
def test_validate_known_bech32(prefix, address):
    assert Chain(prefix).validate_address(address) == address


def test_validate_rejects_bad_checksum(chain, user):
    broken = user[:-1] + ("q" if user[-1] != "q" else "p")
    with pytest.raises(StdError):
        chain.validate_address(broken)


def test_validate_rejects_other_prefix_and_case(chain, user):
    with pytest.raises(StdError):
        chain.validate_address(Chain("osmo").addr_make("user1"))
    with pytest.raises(StdError):
        chain.validate_address(user.upper())
    with pytest.raises(StdError):
        chain.validate_address("not an address")


def test_create_account(chain, user):
    first = chain.create_account(user)
    second = chain.create_account(None)
    assert first.owner == user
    assert second == Account(second.address, None)
    assert first.address != second.address
    assert chain.validate_address(first.address) == first.address


def test_create_account_rejects_invalid_owner(chain):
    with pytest.raises(StdError):
        chain.create_account("nobody")


def test_set_balance_replaces(chain, user):
    chain.set_balance(user, coins(5, DENOM))
    chain.set_balance(user, coins(7, DENOM))
    assert chain.query_balance(user, DENOM) == 7
    assert chain.query_balance(user, "uatom") == 0


def test_instantiate_records_sender(chain, user):
    splitter = _Splitter(chain, chain.addr_make("payout"))
    response = chain.instantiate(splitter, user, "instantiate")
    assert splitter.creator == user
    assert response.attributes == [("action", "instantiate")]


def test_execute_moves_funds(chain, user):
    payout = chain.addr_make("payout")
    splitter = _Splitter(chain, payout)
    chain.set_balance(user, coins(100, DENOM))
    response = chain.execute(splitter, user, "split", coins(100, DENOM))
    assert response.attributes == [("paid", "100")]
    assert chain.query_balance(user, DENOM) == 0
    assert chain.query_balance(payout, DENOM) == 50
    assert chain.query_balance(splitter.address, DENOM) == 50


def test_failed_execute_rolls_back(chain, user):
    splitter = _Splitter(chain, chain.addr_make("payout"))
    chain.set_balance(user, coins(100, DENOM))
    with pytest.raises(StdError, match="refused"):
        chain.execute(splitter, user, "fail", coins(40, DENOM))
    assert chain.query_balance(user, DENOM) == 100
    assert chain.query_balance(splitter.address, DENOM) == 0


def test_contract_overdraw_rolls_back(chain, user):
    payout = chain.addr_make("payout")
    splitter = _Splitter(chain, payout)
    chain.set_balance(user, coins(10, DENOM))
    with pytest.raises(StdError):
        chain.execute(splitter, user, "overdraw", coins(10, DENOM))
    assert chain.query_balance(user, DENOM) == 10
    assert chain.query_balance(payout, DENOM) == 0


def test_sender_without_funds_is_refused(chain, user):
    splitter = _Splitter(chain, chain.addr_make("payout"))
    chain.set_balance(user, coins(10, DENOM))
    with pytest.raises(StdError):
        chain.execute(splitter, user, "split", coins(500, DENOM))
    assert chain.query_balance(user, DENOM) == 10


def test_execute_rejects_invalid_sender(chain):
    splitter = _Splitter(chain, chain.addr_make("payout"))
    with pytest.raises(StdError):
        chain.execute(splitter, "nobody", "split", coins(1, DENOM))