from typing import Any, Dict, List, Optional, Tuple
from ..base_client import BaseAPIClient, RequestTemplate
from ..errors import PurchaseTradableLimitedError
from ..transport import CONTENT_TYPE, USER_AGENT
from dateutil.parser import isoparse
from dataclasses import dataclass
from datetime import datetime
from ..models import Limit


ROBUX_API = "https://economy.roblox.com/v1/users/{user_id}/currency"
RESELLERS_API = "https://economy.roblox.com/v1/assets/{item_id}/resellers"
USER_SALES_API = "https://economy.roblox.com/v2/users/{user_id}/transactions"
TOGGLE_SALE_API = (
    "https://economy.roblox.com/v1/assets/{item_id}/resellable-copies/{uaid}"
)
PURCHASE_TRADABLE_LIMITED_API = (
    "https://economy.roblox.com/v1/purchases/products/{product_id}"
)


@dataclass(frozen=True)
class Listing:
    """One resale listing of a tradable limited."""

    uaid: int
    seller_id: int
    seller_name: str
    price: int
    serial_number: Optional[int]


@dataclass(frozen=True)
class UserSale:
    """One sale made by the authenticated user."""

    sale_id: int
    is_pending: bool
    user_id: int
    username: str
    robux_received: int
    asset_id: int
    asset_name: str
    created_at: datetime


def _purchase_error(
    body: Any,
    status_code: Optional[int] = None
) -> Optional[PurchaseTradableLimitedError]:
    """Map a refused purchase body to a `PurchaseTradableLimitedError`."""
    if not isinstance(body, dict) or body.get("purchased") is not False:
        return None

    reason = str(body.get("reason") or "")
    message = str(body.get("errorMsg") or reason)
    text = f"{reason} {message}".lower()

    if "price" in text and "chang" in text:
        kind = PurchaseTradableLimitedError.KIND_PRICE_CHANGED
    elif "own item" in text or "already own" in text:
        kind = PurchaseTradableLimitedError.KIND_CANNOT_BUY_OWN_ITEM
    elif reason or message:
        kind = PurchaseTradableLimitedError.KIND_PURCHASE_ERROR
    else:
        kind = PurchaseTradableLimitedError.KIND_UNKNOWN

    return PurchaseTradableLimitedError(
        kind, message, status_code=status_code, body=body
    )


class EconomyAPI(BaseAPIClient):
    """
    Provides access to endpoints under https://economy.roblox.com.

    Covers the robux balance, resale listings and sales of the
    authenticated user, and buying or listing tradable limiteds.
    """

    def robux(self) -> int:
        """
        Retrieve the robux balance of the authenticated user.

        Returns
        -------
        int
            Current robux balance.

        Raises
        ------
        RoblosecurityNotSetError
            If no roblosecurity is set.
        """
        user_id = self.resolved_identity()

        template = RequestTemplate("GET", ROBUX_API.format(user_id=user_id))
        resp = self.make_request(template)

        return self.parse(resp, lambda body: int(body["robux"]))

    def resellers(
        self,
        *,
        item_id: int,
        limit: Limit = Limit.TEN,
        cursor: Optional[str] = None
    ) -> Tuple[List[Listing], Optional[str]]:
        """
        Retrieve resale listings of a tradable limited, cheapest first.

        Parameters
        ----------
        item_id : int
            Asset id of the limited.
        limit : Limit, default=Limit.TEN
            Page size.
        cursor : str, optional
            Cursor of the page to fetch.

        Returns
        -------
        tuple(list of Listing, str or None)
            Listings and the cursor of the next page.
        """
        params = {"limit": limit.value, "cursor": cursor}
        params = {k: v for k, v in params.items() if v is not None}

        template = RequestTemplate(
            "GET", RESELLERS_API.format(item_id=item_id), params=params
        )
        resp = self.make_request(template)

        def parse(body: Dict[str, Any]) -> Tuple[List[Listing], Optional[str]]:
            listings = [
                Listing(
                    uaid=int(entry["userAssetId"]),
                    seller_id=int(entry["seller"]["id"]),
                    seller_name=entry["seller"]["name"],
                    price=int(entry["price"]),
                    serial_number=(
                        int(entry["serialNumber"])
                        if entry.get("serialNumber") is not None
                        else None
                    ),
                )
                for entry in body["data"]
            ]
            return listings, body.get("nextPageCursor")

        return self.parse(resp, parse)

    def user_sales(
        self,
        *,
        limit: Limit = Limit.TEN,
        cursor: Optional[str] = None
    ) -> Tuple[List[UserSale], Optional[str]]:
        """
        Retrieve sales made by the authenticated user, newest first.

        Parameters
        ----------
        limit : Limit, default=Limit.TEN
            Page size.
        cursor : str, optional
            Cursor of the page to fetch.

        Returns
        -------
        tuple(list of UserSale, str or None)
            Sales and the cursor of the next page.
        """
        user_id = self.resolved_identity()

        params = {
            "transactionType": "Sale",
            "limit": limit.value,
            "cursor": cursor,
        }
        params = {k: v for k, v in params.items() if v is not None}

        template = RequestTemplate(
            "GET", USER_SALES_API.format(user_id=user_id), params=params
        )
        resp = self.make_request(template)

        def parse(body: Dict[str, Any]) -> Tuple[List[UserSale], Optional[str]]:
            sales = [
                UserSale(
                    sale_id=int(entry["id"]),
                    is_pending=bool(entry["isPending"]),
                    user_id=int(entry["agent"]["id"]),
                    username=entry["agent"]["name"],
                    robux_received=int(entry["currency"]["amount"]),
                    asset_id=int(entry["details"]["id"]),
                    asset_name=entry["details"]["name"],
                    created_at=isoparse(entry["created"]),
                )
                for entry in body["data"]
            ]
            return sales, body.get("nextPageCursor")

        return self.parse(resp, parse)

    def put_limited_on_sale(
        self,
        *,
        item_id: int,
        uaid: int,
        price: int
    ) -> None:
        """
        List a tradable limited for resale.

        Parameters
        ----------
        item_id : int
            Asset id of the limited.
        uaid : int
            User asset id of the copy to sell.
        price : int
            Asking price in robux (must be positive).

        Raises
        ------
        ValueError
            If `price` is not positive.
        """
        if price <= 0:
            raise ValueError("Price must be a positive amount of robux.")

        template = RequestTemplate(
            "PATCH",
            TOGGLE_SALE_API.format(item_id=item_id, uaid=uaid),
            json={"price": price},
        )
        self.make_request(template)

    def take_limited_off_sale(
        self,
        *,
        item_id: int,
        uaid: int
    ) -> None:
        """Remove a resale listing created with `put_limited_on_sale`."""
        template = RequestTemplate(
            "PATCH",
            TOGGLE_SALE_API.format(item_id=item_id, uaid=uaid),
            json={},
        )
        self.make_request(template)

    def purchase_tradable_limited(
        self,
        *,
        product_id: int,
        seller_id: int,
        uaid: int,
        price: int
    ) -> None:
        """
        Buy one resale listing of a tradable limited.

        Parameters
        ----------
        product_id : int
            Product id of the limited (see `CatalogAPI.product_id`).
        seller_id : int
            User id of the seller.
        uaid : int
            User asset id of the listed copy.
        price : int
            Expected price; the purchase is refused if it changed.

        Raises
        ------
        PurchaseTradableLimitedError
            If Roblox refused the purchase.
        """
        template = RequestTemplate(
            "POST",
            PURCHASE_TRADABLE_LIMITED_API.format(product_id=product_id),
            headers={"User-Agent": USER_AGENT, "Content-Type": CONTENT_TYPE},
            json={
                "expectedCurrency": 1,
                "expectedPrice": price,
                "expectedSellerId": seller_id,
                "userAssetId": uaid,
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
