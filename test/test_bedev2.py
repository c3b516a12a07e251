from roboat.endpoints.bedev2 import (
    NON_TRADABLE_LIMITED_DETAILS_API,
    Bedev2API,
    _purchase_error,
)
from roboat.errors import (
    MalformedResponseError,
    PurchaseNonTradableLimitedError,
)
from unittest.mock import patch
import pytest
import uuid


COLLECTIBLE_ID = "61f6a4b5-0c3f-4d38-8d1e-6fa0c8f1b5a1"


@pytest.fixture
def bedev2(api_kwargs):
    return Bedev2API(**api_kwargs)


def _details(collectible_item_id=COLLECTIBLE_ID, **extra):
    entry = {
        "collectibleItemId": collectible_item_id,
        "itemTargetId": 13,
        "name": "UGC Hat",
        "description": "A hat",
        "collectibleProductId": "product-1",
        "creatorId": 77,
        "price": 0,
        "lowestPrice": None,
        "unitsAvailableForConsumption": 10,
        "totalQuantity": 100,
    }
    entry.update(extra)
    return entry


@patch.object(Bedev2API, "make_request")
def test_non_tradable_limited_details(mock_make, bedev2, make_response):
    mock_make.return_value = make_response(200, [_details()])

    details = bedev2.non_tradable_limited_details(
        collectible_item_ids=[COLLECTIBLE_ID]
    )

    assert details[0].item_id == 13
    assert details[0].lowest_price is None
    assert details[0].units_available == 10

    template = mock_make.call_args.args[0]
    assert template.method == "POST"
    assert template.url == NON_TRADABLE_LIMITED_DETAILS_API
    assert template.json == {"itemIds": [COLLECTIBLE_ID]}


def test_non_tradable_limited_details_empty(bedev2):
    with pytest.raises(ValueError, match="At least one collectible"):
        bedev2.non_tradable_limited_details(collectible_item_ids=[])


@patch.object(Bedev2API, "make_request")
def test_collectible_product_and_creator_id(mock_make, bedev2, make_response):
    mock_make.return_value = make_response(200, [_details()])

    assert bedev2.collectible_product_id(
        collectible_item_id=COLLECTIBLE_ID
    ) == "product-1"
    assert bedev2.collectible_creator_id(
        collectible_item_id=COLLECTIBLE_ID
    ) == 77


@patch.object(Bedev2API, "make_request")
def test_collectible_product_id_bulk(mock_make, bedev2, make_response):
    mock_make.return_value = make_response(200, [
        _details("b", collectibleProductId="pb"),
        _details("a", collectibleProductId="pa"),
    ])

    assert bedev2.collectible_product_id_bulk(
        collectible_item_ids=["a", "b"]
    ) == ["pa", "pb"]


@patch.object(Bedev2API, "make_request")
def test_collectible_product_id_missing(mock_make, bedev2, make_response):
    mock_make.return_value = make_response(200, [])

    with pytest.raises(MalformedResponseError):
        bedev2.collectible_product_id(collectible_item_id=COLLECTIBLE_ID)


@patch.object(Bedev2API, "make_request")
def test_purchase_body(mock_make, bedev2, logged_in, make_response):
    mock_make.return_value = make_response(
        200, {"purchased": True, "purchaseResult": "Purchase transaction success."}
    )

    bedev2.purchase_non_tradable_limited(
        collectible_item_id=COLLECTIBLE_ID,
        collectible_product_id="product-1",
        collectible_seller_id=77,
        price=0,
    )

    template = mock_make.call_args.args[0]
    assert template.url.endswith(f"/item/{COLLECTIBLE_ID}/purchase-item")

    body = dict(template.json)
    key = body.pop("idempotencyKey")
    uuid.UUID(key)
    assert body == {
        "collectibleItemId": COLLECTIBLE_ID,
        "collectibleProductId": "product-1",
        "expectedCurrency": 1,
        "expectedPrice": 0,
        "expectedPurchaserId": "1",
        "expectedPurchaserType": "User",
        "expectedSellerId": 77,
        "expectedSellerType": "User",
    }


def test_purchase_retry_reuses_idempotency_key(
    bedev2,
    http,
    logged_in,
    make_response
):
    """
    A token retry resends the same purchase, never a second one.
    """
    http.request.side_effect = [
        make_response(403, None, {"x-csrf-token": "T"}),
        make_response(200, {"purchased": True}),
    ]

    bedev2.purchase_non_tradable_limited(
        collectible_item_id=COLLECTIBLE_ID,
        collectible_product_id="product-1",
        collectible_seller_id=77,
        price=0,
    )

    first, second = http.request.call_args_list
    assert first.kwargs["json"] == second.kwargs["json"]


def test_purchase_sold_out(bedev2, http, logged_in, make_response):
    http.request.return_value = make_response(
        200, {"purchased": False, "errorMessage": "QuantityExhausted"}
    )

    with pytest.raises(PurchaseNonTradableLimitedError) as exc_info:
        bedev2.purchase_non_tradable_limited(
            collectible_item_id=COLLECTIBLE_ID,
            collectible_product_id="product-1",
            collectible_seller_id=77,
            price=0,
        )

    assert exc_info.value.kind == PurchaseNonTradableLimitedError.KIND_SOLD_OUT


@pytest.mark.parametrize(
    "message, kind",
    [
        ("PriceMismatch", PurchaseNonTradableLimitedError.KIND_PRICE_MISMATCH),
        ("InsufficientBalance", PurchaseNonTradableLimitedError.KIND_INSUFFICIENT_FUNDS),
        ("ItemNotForSale", PurchaseNonTradableLimitedError.KIND_NOT_FOR_SALE),
        ("SomethingNew", PurchaseNonTradableLimitedError.KIND_UNKNOWN),
    ],
)
def test_purchase_error_kinds(message, kind):
    error = _purchase_error({"purchased": False, "errorMessage": message})
    assert error.kind == kind
    assert error.roblox_message == message
