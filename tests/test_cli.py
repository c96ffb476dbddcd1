import pytest

from tradeproto.capnproto import serialize_account
from tradeproto.cli import describe_account, main, sample_account
from tradeproto.trade import Account, OrderSide, OrderType, load_account


def test_sample_account_matches_source_values():
    account = sample_account()
    assert account.id == 1
    assert account.name == "Test"
    assert account.wallet.currency == "USD"
    assert account.wallet.amount == 1000
    assert len(account.orders) == 3
    assert [o.id for o in account.orders] == [1, 2, 3]
    assert all(o.symbol == "EURUSD" for o in account.orders)
    assert [o.side for o in account.orders] == [OrderSide.BUY, OrderSide.SELL, OrderSide.BUY]
    assert [o.type for o in account.orders] == [OrderType.MARKET, OrderType.LIMIT, OrderType.STOP]
    assert [o.price for o in account.orders] == [1.23456, 1.0, 1.5]
    assert [o.volume for o in account.orders] == [1000, 100, 10]


def test_sample_account_is_fresh_each_call():
    first = sample_account()
    first.orders.clear()
    assert len(sample_account().orders) == 3


def test_describe_account_header_lines():
    lines = describe_account(sample_account())
    assert lines[0] == "Account.Id = 1"
    assert lines[1] == "Account.Name = Test"
    assert lines[2] == "Account.Wallet.Currency = USD"
    assert lines[3] == "Account.Wallet.Amount = 1000"
    assert len(lines) == 4 + 3


def test_describe_account_order_line():
    lines = describe_account(sample_account())
    assert lines[4] == (
        "Account.Order => Id: 1, Symbol: EURUSD, Side: 0, Type: 0, Price: 1.23456, Volume: 1000"
    )


def test_describe_account_without_orders():
    lines = describe_account(Account(id=7, name="Empty"))
    assert len(lines) == 4
    assert lines[0] == "Account.Id = 7"


def test_main_json_round_trip(capsys):
    assert main(["--format", "json"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == f"Original size: {sample_account().size()}"
    content_line = next(line for line in out if line.startswith("JSON content: "))
    text = content_line[len("JSON content: "):]
    assert load_account(text) == sample_account()
    assert f"JSON size: {len(text.encode('utf-8'))}" in out
    assert out[-3:] == describe_account(sample_account())[-3:]


def test_main_defaults_to_json(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "JSON content: " in out


def test_main_capnproto(capsys):
    assert main(["-f", "capnproto"]) == 0
    out = capsys.readouterr().out.splitlines()
    expected_size = len(serialize_account(sample_account()))
    assert f"Cap'n'Proto size: {expected_size}" in out
    assert "" in out
    assert out[-len(describe_account(sample_account())):] == describe_account(sample_account())


def test_main_rejects_unknown_format():
    with pytest.raises(SystemExit) as info:
        main(["--format", "xml"])
    assert info.value.code == 2