"""Cap'n Proto encoding of trade accounts, following the trade schema layout."""

from __future__ import annotations

from .capnp_layout import CapnpError, MessageBuilder, StructBuilder, StructReader, read_message
from .capnp_schema import ACCOUNT, BALANCE, ORDER
from .trade import Account, Balance, Order, OrderSide, OrderType

_ORDER_ID = ORDER.field("id")
_ORDER_SYMBOL = ORDER.field("symbol")
_ORDER_SIDE = ORDER.field("side")
_ORDER_TYPE = ORDER.field("type")
_ORDER_PRICE = ORDER.field("price")
_ORDER_VOLUME = ORDER.field("volume")

_BALANCE_CURRENCY = BALANCE.field("currency")
_BALANCE_AMOUNT = BALANCE.field("amount")

_ACCOUNT_ID = ACCOUNT.field("id")
_ACCOUNT_NAME = ACCOUNT.field("name")
_ACCOUNT_WALLET = ACCOUNT.field("wallet")
_ACCOUNT_ORDERS = ACCOUNT.field("orders")


def _write_order(builder: StructBuilder, order: Order) -> None:
    builder.set_int32(_ORDER_ID.offset, order.id)
    builder.set_text(_ORDER_SYMBOL.offset, order.symbol)
    builder.set_uint16(_ORDER_SIDE.offset, int(order.side))
    builder.set_uint16(_ORDER_TYPE.offset, int(order.type))
    builder.set_float64(_ORDER_PRICE.offset, order.price)
    builder.set_float64(_ORDER_VOLUME.offset, order.volume)


def _write_balance(builder: StructBuilder, balance: Balance) -> None:
    builder.set_text(_BALANCE_CURRENCY.offset, balance.currency)
    builder.set_float64(_BALANCE_AMOUNT.offset, balance.amount)


def _enum(kind: type, value: int):
    try:
        return kind(value)
    except ValueError:
        raise CapnpError(f"Invalid {kind.__name__} value: {value}") from None


def _read_order(reader: StructReader) -> Order:
    return Order(
        id=reader.get_int32(_ORDER_ID.offset),
        symbol=reader.get_text(_ORDER_SYMBOL.offset),
        side=_enum(OrderSide, reader.get_uint16(_ORDER_SIDE.offset)),
        type=_enum(OrderType, reader.get_uint16(_ORDER_TYPE.offset)),
        price=reader.get_float64(_ORDER_PRICE.offset),
        volume=reader.get_float64(_ORDER_VOLUME.offset),
    )


def _read_balance(reader: StructReader) -> Balance:
    return Balance(
        currency=reader.get_text(_BALANCE_CURRENCY.offset),
        amount=reader.get_float64(_BALANCE_AMOUNT.offset),
    )


def serialize_account(account: Account) -> bytes:
    """Encode an account as a single-segment Cap'n Proto message."""
    message = MessageBuilder()
    root = message.init_root(ACCOUNT.data_words, ACCOUNT.pointer_count)
    root.set_int32(_ACCOUNT_ID.offset, account.id)
    root.set_text(_ACCOUNT_NAME.offset, account.name)
    wallet = root.init_struct(_ACCOUNT_WALLET.offset, BALANCE.data_words, BALANCE.pointer_count)
    _write_balance(wallet, account.wallet)
    builders = root.init_struct_list(
        _ACCOUNT_ORDERS.offset, len(account.orders), ORDER.data_words, ORDER.pointer_count
    )
    for builder, order in zip(builders, account.orders):
        _write_order(builder, order)
    return message.to_bytes()


def deserialize_account(data: bytes) -> Account:
    """Decode an account from a Cap'n Proto message; unset fields read as zero or empty."""
    root = read_message(data)
    return Account(
        id=root.get_int32(_ACCOUNT_ID.offset),
        name=root.get_text(_ACCOUNT_NAME.offset),
        wallet=_read_balance(root.get_struct(_ACCOUNT_WALLET.offset)),
        orders=[_read_order(item) for item in root.get_struct_list(_ACCOUNT_ORDERS.offset)],
    )