from roboat.endpoints.economy import EconomyAPI, _purchase_error
from roboat.errors import PurchaseTradableLimitedError
from unittest.mock import patch
from roboat.models import Limit
import pytest


@pytest.fixture
def economy(api_kwargs):
    return EconomyAPI(**api_kwargs)


@patch.object(EconomyAPI, "make_request")
def test_robux(mock_make, economy, logged_in, make_response):
    mock_make.return_value = make_response(200, {"robux": 1337})

    assert economy.robux() == 1337

    template = mock_make.call_args.args[0]
    assert template.url == "https://economy.roblox.com/v1/users/1/currency"


def test_robux_full_protocol(economy, http, make_response):
    """
    Identity lookup, token rotation and the balance call go through the
    same shared session state.
    """
    http.request.side_effect = [
        make_response(200, {"id": 7, "name": "a", "displayName": "A"}),
        make_response(403, None, {"x-csrf-token": "ABC"}),
        make_response(200, {"robux": 5}),
    ]

    assert economy.robux() == 5
    assert http.request.call_count == 3
    assert http.request.call_args_list[2].args[1].endswith("/users/7/currency")
    assert http.request.call_args_list[2].kwargs["headers"]["x-csrf-token"] == "ABC"


@patch.object(EconomyAPI, "make_request")
def test_resellers(mock_make, economy, make_response):
    mock_make.return_value = make_response(200, {
        "nextPageCursor": None,
        "data": [
            {
                "userAssetId": 11,
                "seller": {"id": 2, "name": "seller"},
                "price": 500,
                "serialNumber": None,
            },
            {
                "userAssetId": 12,
                "seller": {"id": 3, "name": "other"},
                "price": 600,
                "serialNumber": 4,
            },
        ],
    })

    listings, cursor = economy.resellers(
        item_id=1365767, limit=Limit.HUNDRED, cursor="abc"
    )

    assert cursor is None
    assert [listing.uaid for listing in listings] == [11, 12]
    assert listings[0].serial_number is None
    assert listings[1].serial_number == 4

    template = mock_make.call_args.args[0]
    assert template.url.endswith("/assets/1365767/resellers")
    assert dict(template.params) == {"limit": 100, "cursor": "abc"}


@patch.object(EconomyAPI, "make_request")
def test_user_sales(mock_make, economy, logged_in, make_response):
    mock_make.return_value = make_response(200, {
        "nextPageCursor": "n",
        "data": [{
            "id": 99,
            "isPending": True,
            "agent": {"id": 5, "name": "buyer"},
            "currency": {"amount": 70},
            "details": {"id": 1365767, "name": "Valkyrie Helm"},
            "created": "2023-03-01T12:00:00Z",
        }],
    })

    sales, cursor = economy.user_sales()

    assert cursor == "n"
    assert sales[0].robux_received == 70
    assert sales[0].asset_name == "Valkyrie Helm"
    assert sales[0].created_at.month == 3

    template = mock_make.call_args.args[0]
    assert template.params["transactionType"] == "Sale"
    assert "cursor" not in template.params


@patch.object(EconomyAPI, "make_request")
def test_put_and_take_limited_off_sale(mock_make, economy, make_response):
    mock_make.return_value = make_response(200, {})

    economy.put_limited_on_sale(item_id=1, uaid=2, price=100)
    put = mock_make.call_args.args[0]

    economy.take_limited_off_sale(item_id=1, uaid=2)
    take = mock_make.call_args.args[0]

    assert put.method == take.method == "PATCH"
    assert put.url == take.url
    assert put.url.endswith("/assets/1/resellable-copies/2")
    assert put.json == {"price": 100}
    assert take.json == {}


def test_put_limited_on_sale_rejects_bad_price(economy, http):
    with pytest.raises(ValueError, match="positive"):
        economy.put_limited_on_sale(item_id=1, uaid=2, price=0)
    http.request.assert_not_called()


@patch.object(EconomyAPI, "make_request")
def test_purchase_tradable_limited_body(mock_make, economy, make_response):
    mock_make.return_value = make_response(200, {"purchased": True})

    economy.purchase_tradable_limited(
        product_id=21, seller_id=2, uaid=11, price=500
    )

    template = mock_make.call_args.args[0]
    assert template.url.endswith("/purchases/products/21")
    assert template.json == {
        "expectedCurrency": 1,
        "expectedPrice": 500,
        "expectedSellerId": 2,
        "userAssetId": 11,
    }
    assert "User-Agent" in template.headers
    assert mock_make.call_args.kwargs["domain_errors"] is not None


def test_purchase_refused_in_success_body(economy, http, make_response):
    http.request.return_value = make_response(200, {
        "purchased": False,
        "reason": "InsufficientFunds",
        "errorMsg": "The price of this item has changed.",
    })

    with pytest.raises(PurchaseTradableLimitedError) as exc_info:
        economy.purchase_tradable_limited(
            product_id=21, seller_id=2, uaid=11, price=500
        )

    assert exc_info.value.kind == PurchaseTradableLimitedError.KIND_PRICE_CHANGED
    http.request.assert_called_once()


def test_purchase_refused_with_error_status(economy, http, make_response):
    http.request.return_value = make_response(
        409, {"purchased": False, "reason": "Something else"}
    )

    with pytest.raises(PurchaseTradableLimitedError) as exc_info:
        economy.purchase_tradable_limited(
            product_id=21, seller_id=2, uaid=11, price=500
        )

    assert exc_info.value.kind == PurchaseTradableLimitedError.KIND_PURCHASE_ERROR
    assert exc_info.value.status_code == 409


@pytest.mark.parametrize(
    "body, kind",
    [
        (
            {"purchased": False, "errorMsg": "You already own this item."},
            PurchaseTradableLimitedError.KIND_CANNOT_BUY_OWN_ITEM,
        ),
        (
            {"purchased": False, "reason": "PriceChanged"},
            PurchaseTradableLimitedError.KIND_PRICE_CHANGED,
        ),
        (
            {"purchased": False},
            PurchaseTradableLimitedError.KIND_UNKNOWN,
        ),
    ],
)
def test_purchase_error_kinds(body, kind):
    assert _purchase_error(body).kind == kind


def test_purchase_error_ignores_successful_purchase():
    assert _purchase_error({"purchased": True}) is None
    assert _purchase_error(None) is None
