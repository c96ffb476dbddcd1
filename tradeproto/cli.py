"""Command line demo: build a sample account, encode it, decode it and show the result."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from .capnproto import deserialize_account, serialize_account
from .trade import Account, Balance, Order, OrderSide, OrderType, dump_account, load_account

FORMATS = ("json", "capnproto")


def sample_account() -> Account:
    """Return the account with three orders that the demos and benchmarks use."""
    return Account(
        id=1,
        name="Test",
        wallet=Balance("USD", 1000),
        orders=[
            Order(1, "EURUSD", OrderSide.BUY, OrderType.MARKET, 1.23456, 1000),
            Order(2, "EURUSD", OrderSide.SELL, OrderType.LIMIT, 1.0, 100),
            Order(3, "EURUSD", OrderSide.BUY, OrderType.STOP, 1.5, 10),
        ],
    )


def _number(value: float) -> str:
    return f"{value:g}"


def describe_account(account: Account) -> list[str]:
    """Return the account content as display lines."""
    lines = [
        f"Account.Id = {account.id}",
        f"Account.Name = {account.name}",
        f"Account.Wallet.Currency = {account.wallet.currency}",
        f"Account.Wallet.Amount = {_number(account.wallet.amount)}",
    ]
    lines.extend(
        f"Account.Order => Id: {order.id}"
        f", Symbol: {order.symbol}"
        f", Side: {int(order.side)}"
        f", Type: {int(order.type)}"
        f", Price: {_number(order.price)}"
        f", Volume: {_number(order.volume)}"
        for order in account.orders
    )
    return lines


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tradeproto",
        description="Serialize a sample trade account and show it decoded again.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default="json",
        help="serialization format (default: json)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the demo for the chosen format and print sizes and the decoded account."""
    args = _build_parser().parse_args(argv)
    account = sample_account()

    print(f"Original size: {account.size()}")
    if args.format == "json":
        text = dump_account(account)
        print(f"JSON content: {text}")
        print(f"JSON size: {len(text.encode('utf-8'))}")
        deserialized = load_account(text)
    else:
        data = serialize_account(account)
        print(f"Cap'n'Proto size: {len(data)}")
        deserialized = deserialize_account(data)

    print()
    for line in describe_account(deserialized):
        print(line)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())