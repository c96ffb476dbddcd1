# tradeproto

A small library of trade models (`Account`, `Balance`, `Order`, with the
`OrderSide` and `OrderType` enums) together with two wire encodings for them:

- **JSON**: `dump_account` and `load_account` in `tradeproto.trade`, and
  `to_json` / `from_json` on every model. Keys missing from the input keep
  the model's defaults.
- **Cap'n Proto**: `serialize_account` and `deserialize_account` in
  `tradeproto.capnproto`. They are built on a pure-Python single-segment
  message layout (`tradeproto.capnp_layout`, with `MessageBuilder`,
  `StructBuilder`, `StructReader`, `read_message` and `CapnpError`) and the
  trade schema (`tradeproto.capnp_schema`, with `struct_schema` and
  `enum_schema`).

`tradeproto.fbe_types` provides helper value types: `DecimalValue` (a decimal
held as a double), `Flags` (enum flag sets of a fixed bit width), `Uuid`
(nil, time-based and random identifiers), `base64_encode` / `base64_decode`,
`unhex`, `epoch` and `utc`.

Symbols and currencies are held in fixed ten-byte fields, so they are cut to
at most nine bytes.

It has no runtime dependencies.

## Installation

```
pip install .
```

## Usage

```python
from tradeproto.trade import Account, Balance, Order, OrderSide, OrderType, dump_account, load_account
from tradeproto.capnproto import serialize_account, deserialize_account

account = Account(1, "Test", Balance("USD", 1000.0))
account.orders.append(Order(1, "EURUSD", OrderSide.BUY, OrderType.MARKET, 1.23456, 1000.0))

text = dump_account(account)
assert load_account(text).orders[0].symbol == "EURUSD"

data = serialize_account(account)
assert deserialize_account(data).name == "Test"
```

## Command line

Serialize a sample account with three orders, print the sizes and the
account as read back:

```
tradeproto
tradeproto --format capnproto
```

`--format` takes `json` (the default) or `capnproto`.

## What it does not do

Cap'n Proto messages are written and read as a single segment; far pointers
and multi-segment messages are rejected with `CapnpError`. There is no
Fast Binary Encoding message buffer or model, and no command for timing the
encodings.

## Tests

```
pip install ".[test]"
pytest
```