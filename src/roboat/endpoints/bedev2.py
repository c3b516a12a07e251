from typing import Any, Dict, List, Optional
from ..base_client import BaseAPIClient, RequestTemplate
from ..errors import (
    MalformedResponseError,
    PurchaseNonTradableLimitedError,
)
from dataclasses import dataclass
import uuid


NON_TRADABLE_LIMITED_DETAILS_API = (
    "https://apis.roblox.com/marketplace-items/v1/items/details"
)
PURCHASE_NON_TRADABLE_LIMITED_API = (
    "https://apis.roblox.com/marketplace-sales/v1/item/"
    "{collectible_item_id}/purchase-item"
)

# Roblox errorMessage values of a refused purchase.
_PURCHASE_ERROR_KINDS = {
    "PriceMismatch": PurchaseNonTradableLimitedError.KIND_PRICE_MISMATCH,
    "QuantityExhausted": PurchaseNonTradableLimitedError.KIND_SOLD_OUT,
    "InsufficientBalance": PurchaseNonTradableLimitedError.KIND_INSUFFICIENT_FUNDS,
    "ItemNotForSale": PurchaseNonTradableLimitedError.KIND_NOT_FOR_SALE,
    "NotForSale": PurchaseNonTradableLimitedError.KIND_NOT_FOR_SALE,
}


@dataclass(frozen=True)
class NonTradableLimitedDetails:
    """
    Marketplace data of a non-tradable (UGC) limited.

    `price` is the creator's price; `lowest_price` is None while no copy
    is on sale.
    """

    collectible_item_id: str
    item_id: int
    name: str
    description: str
    collectible_product_id: str
    creator_id: int
    price: int
    lowest_price: Optional[int]
    units_available: int
    total_quantity: int


def _non_tradable_limited_details(
    entry: Dict[str, Any]
) -> NonTradableLimitedDetails:
    return NonTradableLimitedDetails(
        collectible_item_id=entry["collectibleItemId"],
        item_id=int(entry["itemTargetId"]),
        name=entry["name"],
        description=entry.get("description") or "",
        collectible_product_id=entry["collectibleProductId"],
        creator_id=int(entry["creatorId"]),
        price=int(entry["price"]),
        lowest_price=(
            int(entry["lowestPrice"])
            if entry.get("lowestPrice") is not None
            else None
        ),
        units_available=int(entry.get("unitsAvailableForConsumption") or 0),
        total_quantity=int(entry.get("totalQuantity") or 0),
    )


def _purchase_error(
    body: Any,
    status_code: Optional[int] = None
) -> Optional[PurchaseNonTradableLimitedError]:
    """Map a refused purchase body to a `PurchaseNonTradableLimitedError`."""
    if not isinstance(body, dict) or body.get("purchased") is not False:
        return None

    message = str(body.get("errorMessage") or "")
    kind = _PURCHASE_ERROR_KINDS.get(
        message, PurchaseNonTradableLimitedError.KIND_UNKNOWN
    )

    return PurchaseNonTradableLimitedError(
        kind, message, status_code=status_code, body=body
    )


class Bedev2API(BaseAPIClient):
    """
    Provides access to marketplace endpoints under https://apis.roblox.com.

    These endpoints deal with non-tradable limiteds, identified by a
    collectible item id (a UUID string) rather than an asset id. Use
    `CatalogAPI.collectible_item_id` to translate an asset id.
    """

    def non_tradable_limited_details(
        self,
        *,
        collectible_item_ids: List[str]
    ) -> List[NonTradableLimitedDetails]:
        """
        Retrieve marketplace details of non-tradable limiteds.

        Parameters
        ----------
        collectible_item_ids : list of str
            Collectible item ids to look up.

        Returns
        -------
        list of NonTradableLimitedDetails
            Details in the order Roblox returned them.

        Raises
        ------
        ValueError
            If `collectible_item_ids` is empty.
        """
        if not collectible_item_ids:
            raise ValueError("At least one collectible item id must be provided.")

        template = RequestTemplate(
            "POST",
            NON_TRADABLE_LIMITED_DETAILS_API,
            json={"itemIds": list(collectible_item_ids)},
        )
        resp = self.make_request(template)

        return self.parse(
            resp,
            lambda body: [_non_tradable_limited_details(e) for e in body],
        )

    def _details_by_id(
        self,
        collectible_item_ids: List[str]
    ) -> Dict[str, NonTradableLimitedDetails]:
        details = self.non_tradable_limited_details(
            collectible_item_ids=collectible_item_ids
        )
        return {d.collectible_item_id: d for d in details}

    def collectible_product_id(
        self,
        *,
        collectible_item_id: str
    ) -> str:
        """Collectible product id of a non-tradable limited."""
        return self.collectible_product_id_bulk(
            collectible_item_ids=[collectible_item_id]
        )[0]

    def collectible_product_id_bulk(
        self,
        *,
        collectible_item_ids: List[str]
    ) -> List[str]:
        """
        Collectible product ids, in the order of `collectible_item_ids`.

        Raises
        ------
        MalformedResponseError
            If Roblox returned no entry for one of the ids.
        """
        details = self._details_by_id(collectible_item_ids)

        product_ids = []
        for collectible_item_id in collectible_item_ids:
            found = details.get(collectible_item_id)
            if found is None:
                raise MalformedResponseError(
                    f"No details returned for collectible {collectible_item_id}."
                )
            product_ids.append(found.collectible_product_id)

        return product_ids

    def collectible_creator_id(
        self,
        *,
        collectible_item_id: str
    ) -> int:
        """User id of the creator of a non-tradable limited."""
        details = self._details_by_id([collectible_item_id])

        found = details.get(collectible_item_id)
        if found is None:
            raise MalformedResponseError(
                f"No details returned for collectible {collectible_item_id}."
            )

        return found.creator_id

    def purchase_non_tradable_limited(
        self,
        *,
        collectible_item_id: str,
        collectible_product_id: str,
        collectible_seller_id: int,
        price: int
    ) -> None:
        """
        Buy a non-tradable limited from its creator.

        Parameters
        ----------
        collectible_item_id : str
            Collectible item id of the limited.
        collectible_product_id : str
            See `collectible_product_id`.
        collectible_seller_id : int
            User id of the seller, usually the creator
            (see `collectible_creator_id`).
        price : int
            Expected price in robux, 0 for free items.

        Raises
        ------
        PurchaseNonTradableLimitedError
            If Roblox refused the purchase.
        """
        purchaser_id = self.resolved_identity()

        template = RequestTemplate(
            "POST",
            PURCHASE_NON_TRADABLE_LIMITED_API.format(
                collectible_item_id=collectible_item_id
            ),
            json={
                "collectibleItemId": collectible_item_id,
                "collectibleProductId": collectible_product_id,
                "expectedCurrency": 1,
                "expectedPrice": price,
                "expectedPurchaserId": str(purchaser_id),
                "expectedPurchaserType": "User",
                "expectedSellerId": collectible_seller_id,
                "expectedSellerType": "User",
                "idempotencyKey": str(uuid.uuid4()),
            },
        )
        resp = self.make_request(
            template,
            domain_errors=lambda status, body: _purchase_error(body, status),
        )

        error = self.parse(
            resp, lambda body: _purchase_error(body, resp.status_code)
        )
        if error is not None:
            raise error
