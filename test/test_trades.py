from roboat.endpoints.trades import TradesAPI, TradeType
from unittest.mock import patch
import pytest


@pytest.fixture
def trades(api_kwargs):
    return TradesAPI(**api_kwargs)


@patch.object(TradesAPI, "make_request")
def test_trades(mock_make, trades, make_response):
    mock_make.return_value = make_response(200, {
        "previousPageCursor": None,
        "nextPageCursor": None,
        "data": [{
            "id": 123,
            "user": {"id": 2, "name": "partner", "displayName": "Partner"},
            "created": "2023-06-01T10:00:00.123Z",
            "isActive": True,
            "status": "Open",
        }],
    })

    found, cursor = trades.trades(trade_type=TradeType.INBOUND)

    assert cursor is None
    assert found[0].trade_id == 123
    assert found[0].partner.username == "partner"
    assert found[0].status == "Open"

    template = mock_make.call_args.args[0]
    assert template.url == "https://trades.roblox.com/v1/trades/Inbound"
    assert dict(template.params) == {"limit": 10, "sortOrder": "Desc"}


@patch.object(TradesAPI, "make_request")
def test_trades_with_cursor(mock_make, trades, make_response):
    mock_make.return_value = make_response(
        200, {"nextPageCursor": "n2", "data": []}
    )

    found, cursor = trades.trades(
        trade_type=TradeType.COMPLETED, cursor="n1"
    )

    assert found == []
    assert cursor == "n2"
    template = mock_make.call_args.args[0]
    assert template.url.endswith("/trades/Completed")
    assert template.params["cursor"] == "n1"
