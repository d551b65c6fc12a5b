"""An in-memory chain: addresses, bank balances, funds and contract calls."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Protocol

from .errors import PaymentError, StdError

_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_GENERATORS = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


def _polymod(values: Iterable[int]) -> int:
    checksum = 1
    for value in values:
        top = checksum >> 25
        checksum = ((checksum & 0x1FFFFFF) << 5) ^ value
        for bit, generator in enumerate(_GENERATORS):
            if (top >> bit) & 1:
                checksum ^= generator
    return checksum


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _convert_bits(data: Iterable[int], from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    out: list[int] = []
    maxv = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1
    for value in data:
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & maxv)
    if pad:
        if bits:
            out.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits or (acc << (to_bits - bits)) & maxv:
        raise ValueError("invalid padding")
    return out


def _bech32_encode(hrp: str, payload: bytes) -> str:
    data = _convert_bits(payload, 8, 5, pad=True)
    polymod = _polymod(_hrp_expand(hrp) + data + [0] * 6) ^ 1
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]
    return hrp + "1" + "".join(_CHARSET[d] for d in data + checksum)


def _bech32_decode(address: str) -> tuple[str, bytes]:
    if address != address.lower():
        raise ValueError("address is not normalised to lower case")
    separator = address.rfind("1")
    if separator < 1 or separator + 7 > len(address):
        raise ValueError("missing separator or checksum")
    hrp, data_part = address[:separator], address[separator + 1:]
    if any(not 33 <= ord(c) <= 126 for c in hrp):
        raise ValueError("invalid prefix character")
    if any(c not in _CHARSET for c in data_part):
        raise ValueError("invalid data character")
    data = [_CHARSET.index(c) for c in data_part]
    if _polymod(_hrp_expand(hrp) + data) != 1:
        raise ValueError("invalid checksum")
    return hrp, bytes(_convert_bits(data[:-6], 5, 8, pad=False))


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: int


def coins(amount: int, denom: str) -> list[Coin]:
    """A one-coin list."""
    return [Coin(denom, amount)]


@dataclass(frozen=True)
class BankSend:
    """Send `amount` from the contract to `to_address`."""

    to_address: str
    amount: tuple[Coin, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", tuple(self.amount))


@dataclass
class Response:
    """What a contract call returns: messages to dispatch and attributes to log."""

    messages: list[BankSend] = field(default_factory=list)
    attributes: list[tuple[str, str]] = field(default_factory=list)

    def add_message(self, message: BankSend) -> Response:
        self.messages.append(message)
        return self

    def add_attribute(self, key: str, value: Any) -> Response:
        self.attributes.append((key, str(value)))
        return self


@dataclass(frozen=True)
class MessageInfo:
    sender: str
    funds: tuple[Coin, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "funds", tuple(self.funds))


@dataclass(frozen=True)
class Account:
    """An account that installs apps; `owner` may be unset."""

    address: str
    owner: Optional[str]


def must_pay(info: MessageInfo, denom: str) -> int:
    """The amount of the single non-zero coin of `denom` sent with `info`."""
    if not info.funds:
        raise PaymentError("No funds sent")
    if len(info.funds) > 1:
        raise PaymentError("Sent more than one denomination")
    coin = info.funds[0]
    if coin.amount == 0:
        raise PaymentError("No funds sent")
    if coin.denom != denom:
        raise PaymentError(f"Must send '{denom}'")
    return coin.amount


def nonpayable(info: MessageInfo) -> None:
    """Reject a message that carries funds."""
    if info.funds:
        raise PaymentError("This message does no accept funds")


class _Contract(Protocol):
    address: str

    def instantiate(self, info: MessageInfo, msg: Any) -> Response: ...

    def execute(self, info: MessageInfo, msg: Any) -> Response: ...


class Chain:
    """Bank balances and contract calls; a failed call leaves balances untouched."""

    def __init__(self, prefix: str = "mock") -> None:
        self.prefix = prefix
        self._balances: dict[str, dict[str, int]] = {}
        self._contracts: dict[str, _Contract] = {}
        self._account_count = 0
        self.sender = self.addr_make("sender")

    def addr_make(self, name: str) -> str:
        """A valid address derived deterministically from `name`."""
        return _bech32_encode(self.prefix, hashlib.sha256(name.encode()).digest())

    def validate_address(self, address: str) -> str:
        try:
            hrp, _ = _bech32_decode(address)
        except ValueError as exc:
            raise StdError(f"Invalid input: {exc}") from exc
        if hrp != self.prefix:
            raise StdError(f"Invalid input: wrong address prefix '{hrp}'")
        return address

    def create_account(self, owner: Optional[str]) -> Account:
        if owner is not None:
            self.validate_address(owner)
        self._account_count += 1
        return Account(self.addr_make(f"account-{self._account_count}"), owner)

    def set_balance(self, address: str, amounts: Iterable[Coin]) -> None:
        self.validate_address(address)
        self._balances[address] = {c.denom: c.amount for c in amounts if c.amount}

    def query_balance(self, address: str, denom: str) -> int:
        return self._balances.get(address, {}).get(denom, 0)

    def instantiate(self, contract: _Contract, sender: str, msg: Any) -> Response:
        self.validate_address(contract.address)
        info = MessageInfo(self.validate_address(sender))
        response = self._run(contract, info, lambda i: contract.instantiate(i, msg))
        self._contracts[contract.address] = contract
        return response

    def execute(
        self, contract: _Contract, sender: str, msg: Any, funds: Iterable[Coin] = ()
    ) -> Response:
        info = MessageInfo(self.validate_address(sender), tuple(funds))
        return self._run(contract, info, lambda i: contract.execute(i, msg))

    def _run(
        self,
        contract: _Contract,
        info: MessageInfo,
        handler: Callable[[MessageInfo], Response],
    ) -> Response:
        snapshot = {address: dict(held) for address, held in self._balances.items()}
        try:
            self._transfer(info.sender, contract.address, info.funds)
            response = handler(info)
            for message in response.messages:
                if not isinstance(message, BankSend):
                    raise TypeError(f"unsupported message: {message!r}")
                self._transfer(contract.address, message.to_address, message.amount)
        except Exception:
            self._balances = snapshot
            raise
        return response

    def _transfer(self, source: str, target: str, amount: Iterable[Coin]) -> None:
        for coin in amount:
            if coin.amount < 0:
                raise StdError(f"Invalid coin amount: {coin.amount}")
            held = self.query_balance(source, coin.denom)
            if held < coin.amount:
                raise StdError(
                    f"insufficient funds: {source} has {held}{coin.denom}, "
                    f"needs {coin.amount}{coin.denom}"
                )
            if coin.amount == 0:
                continue
            self._balances.setdefault(source, {})[coin.denom] = held - coin.amount
            target_held = self._balances.setdefault(target, {})
            target_held[coin.denom] = target_held.get(coin.denom, 0) + coin.amount