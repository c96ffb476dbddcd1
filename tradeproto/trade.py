"""Trade domain model (orders, balances, accounts) and its JSON form."""

from __future__ import annotations

import dataclasses
import enum
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

SYMBOL_SIZE = 10
CURRENCY_SIZE = 10

_INT_SIZE = 4
_ORDER_SIZE = 32
_BALANCE_SIZE = 24


class OrderSide(enum.IntEnum):
    """Side of an order."""

    BUY = 0
    SELL = 1


class OrderType(enum.IntEnum):
    """Type of an order."""

    MARKET = 0
    LIMIT = 1
    STOP = 2


def _fixed(text: str, capacity: int) -> str:
    """Fit text into a NUL-terminated character field of the given capacity."""
    raw = str(text).encode("utf-8")
    nul = raw.find(b"\0")
    if nul >= 0:
        raw = raw[:nul]
    return raw[: capacity - 1].decode("utf-8", errors="ignore")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_object(obj: Any) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        raise ValueError("JSON object expected")
    return obj


@dataclass
class Order:
    """A single trade order."""

    id: int = 0
    symbol: str = "<???>"
    side: OrderSide = OrderSide.BUY
    type: OrderType = OrderType.MARKET
    price: float = 0.0
    volume: float = 0.0

    def __post_init__(self) -> None:
        self.symbol = _fixed(self.symbol, SYMBOL_SIZE)
        self.side = OrderSide(self.side)
        self.type = OrderType(self.type)
        self.price = float(self.price)
        self.volume = float(self.volume)

    def size(self) -> int:
        """Size of the order in its fixed in-memory layout."""
        return _ORDER_SIZE

    def to_json(self) -> dict[str, Any]:
        """Return the order as a JSON-ready dictionary."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "side": int(self.side),
            "type": int(self.type),
            "price": self.price,
            "volume": self.volume,
        }

    def _updated(self, obj: Any) -> Order:
        obj = _require_object(obj)
        changes: dict[str, Any] = {}
        if _is_int(obj.get("id")):
            changes["id"] = obj["id"]
        if isinstance(obj.get("symbol"), str):
            changes["symbol"] = obj["symbol"]
        if _is_int(obj.get("side")):
            changes["side"] = OrderSide(obj["side"])
        if _is_int(obj.get("type")):
            changes["type"] = OrderType(obj["type"])
        if _is_number(obj.get("price")):
            changes["price"] = float(obj["price"])
        if _is_number(obj.get("volume")):
            changes["volume"] = float(obj["volume"])
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_json(cls, obj: Any) -> Order:
        """Build an order from a JSON object; missing keys keep their defaults."""
        return cls()._updated(obj)


@dataclass
class Balance:
    """Amount of money in one currency."""

    currency: str = "<???>"
    amount: float = 0.0

    def __post_init__(self) -> None:
        self.currency = _fixed(self.currency, CURRENCY_SIZE)
        self.amount = float(self.amount)

    def size(self) -> int:
        """Size of the balance in its fixed in-memory layout."""
        return _BALANCE_SIZE

    def to_json(self) -> dict[str, Any]:
        """Return the balance as a JSON-ready dictionary."""
        return {"currency": self.currency, "amount": self.amount}

    def _updated(self, obj: Any) -> Balance:
        obj = _require_object(obj)
        changes: dict[str, Any] = {}
        if isinstance(obj.get("currency"), str):
            changes["currency"] = obj["currency"]
        if _is_number(obj.get("amount")):
            changes["amount"] = float(obj["amount"])
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_json(cls, obj: Any) -> Balance:
        """Build a balance from a JSON object; missing keys keep their defaults."""
        return cls()._updated(obj)


@dataclass
class Account:
    """A trading account with a wallet and a list of orders."""

    id: int = 0
    name: str = "<<???>>"
    wallet: Balance = field(default_factory=lambda: Balance("<<???>>", 0.0))
    orders: list[Order] = field(default_factory=list)

    def size(self) -> int:
        """Size of the account data: id, name bytes, wallet and all orders."""
        return (
            _INT_SIZE
            + len(self.name.encode("utf-8"))
            + self.wallet.size()
            + sum(order.size() for order in self.orders)
        )

    def to_json(self) -> dict[str, Any]:
        """Return the account as a JSON-ready dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "wallet": self.wallet.to_json(),
            "orders": [order.to_json() for order in self.orders],
        }

    @classmethod
    def from_json(cls, obj: Any) -> Account:
        """Build an account from a JSON object; missing keys keep their defaults."""
        obj = _require_object(obj)
        account = cls()
        if _is_int(obj.get("id")):
            account.id = obj["id"]
        if isinstance(obj.get("name"), str):
            account.name = obj["name"]
        wallet = obj.get("wallet")
        if isinstance(wallet, Mapping):
            account.wallet = account.wallet._updated(wallet)
        orders = obj.get("orders")
        if isinstance(orders, list):
            account.orders = [Order.from_json(item) for item in orders]
        return account


def dump_account(account: Account) -> str:
    """Serialize an account to a compact JSON string."""
    return json.dumps(account.to_json(), separators=(",", ":"), ensure_ascii=False)


def load_account(text: str) -> Account:
    """Parse a JSON string and build an account from it."""
    document = json.loads(text)
    if not isinstance(document, dict):
        raise ValueError("JSON object expected")
    return Account.from_json(document)