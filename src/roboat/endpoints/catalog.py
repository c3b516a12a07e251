from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Tuple
from ..base_client import BaseAPIClient, RequestTemplate
from ..errors import MalformedResponseError
from ..models import Limit
from rich.progress import Progress
from dataclasses import dataclass
from enum import Enum
import numpy as np


ITEM_DETAILS_API = "https://catalog.roblox.com/v1/catalog/items/details"
AVATAR_CATALOG_SEARCH_API = "https://catalog.roblox.com/v1/search/items"


class ItemType(Enum):
    ASSET = "Asset"
    BUNDLE = "Bundle"


@dataclass(frozen=True)
class Item:
    """Reference to a catalog item, used to request its details."""

    item_type: ItemType
    item_id: int


@dataclass(frozen=True)
class ItemDetails:
    """
    Catalog data of an item.

    `price` is None for items that are off sale; `lowest_price` is only
    set for limiteds with resale listings; `collectible_item_id` is only
    set for non-tradable (UGC) limiteds.
    """

    item_id: int
    item_type: ItemType
    name: str
    description: str
    creator_id: int
    creator_name: str
    price: Optional[int]
    lowest_price: Optional[int]
    product_id: Optional[int]
    collectible_item_id: Optional[str]


@dataclass(frozen=True)
class AvatarSearchQuery:
    """
    Filters of an avatar catalog search. Unset fields are not sent.

    `category` and `subcategory` take the names Roblox uses in the avatar
    shop (e.g. "Accessories", "HeadAccessories").
    """

    keyword: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    creator_name: Optional[str] = None
    creator_type: Optional[str] = None
    sort_type: Optional[int] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    include_not_for_sale: Optional[bool] = None

    def to_params(self) -> Dict[str, Any]:
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("min_price cannot be greater than max_price.")

        params = {
            "keyword": self.keyword,
            "category": self.category,
            "subcategory": self.subcategory,
            "creatorName": self.creator_name,
            "creatorType": self.creator_type,
            "sortType": self.sort_type,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "includeNotForSale": (
                None if self.include_not_for_sale is None
                else str(self.include_not_for_sale).lower()
            ),
        }
        return {k: v for k, v in params.items() if v is not None}


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _item_details(entry: Dict[str, Any]) -> ItemDetails:
    return ItemDetails(
        item_id=int(entry["id"]),
        item_type=ItemType(entry["itemType"]),
        name=entry["name"],
        description=entry.get("description") or "",
        creator_id=int(entry["creatorTargetId"]),
        creator_name=entry.get("creatorName") or "",
        price=_optional_int(entry.get("price")),
        lowest_price=_optional_int(entry.get("lowestPrice")),
        product_id=_optional_int(entry.get("productId")),
        collectible_item_id=entry.get("collectibleItemId"),
    )


class CatalogAPI(BaseAPIClient):
    """
    Provides access to endpoints under https://catalog.roblox.com.

    Notes
    -----
    - Roblox accepts at most 120 items per details request; larger lists
      are split into chunks fetched concurrently.
    - The details endpoint needs an xcsrf token but no roblosecurity, so
      it works on clients without a cookie.
    """

    max_items_per_request = 120

    def _chunk_items(
        self,
        items: List[Item],
        max_items: int
    ) -> List[List[Item]]:
        """
        Split `items` into the fewest evenly sized chunks of at most
        `max_items` elements, preserving order.
        """
        n_chunks = -(-len(items) // max_items)
        return [
            [items[i] for i in idx]
            for idx in np.array_split(np.arange(len(items)), n_chunks)
        ]

    def _in_input_order(
        self,
        items: List[Item],
        details: List[ItemDetails]
    ) -> List[ItemDetails]:
        """Sort `details` by the position of their item in `items`."""
        position: Dict[Tuple[ItemType, int], int] = {}
        for i, item in enumerate(items):
            position.setdefault((item.item_type, item.item_id), i)

        return sorted(
            details,
            key=lambda d: position.get((d.item_type, d.item_id), len(items)),
        )

    def _fetch_item_details(
        self,
        items: List[Item]
    ) -> List[ItemDetails]:
        template = RequestTemplate(
            "POST",
            ITEM_DETAILS_API,
            json={
                "items": [
                    {"itemType": item.item_type.value, "id": item.item_id}
                    for item in items
                ]
            },
        )
        resp = self.make_request(template, requires_auth=False)

        return self.parse(
            resp, lambda body: [_item_details(e) for e in body["data"]]
        )

    def item_details(
        self,
        *,
        items: List[Item],
        max_workers: int = 8
    ) -> List[ItemDetails]:
        """
        Retrieve catalog details for a list of items.

        Parameters
        ----------
        items : list of Item
            Items to look up.
        max_workers : int, default=8
            Number of threads used when the list has to be chunked.

        Returns
        -------
        list of ItemDetails
            Details in the order of `items`. Items Roblox does not know
            are left out.

        Raises
        ------
        ValueError
            If `items` is empty.
        RoboatError
            If any chunk fails; the first failure observed is raised.
        """
        if not items:
            raise ValueError("At least one item must be provided.")

        if len(items) <= self.max_items_per_request:
            return self._in_input_order(items, self._fetch_item_details(items))

        chunks = self._chunk_items(items, self.max_items_per_request)
        results: List[Optional[List[ItemDetails]]] = [None] * len(chunks)

        self.logger.info(
            f"Fetching details of {len(items)} items in {len(chunks)} chunks"
        )

        with Progress() as progress:
            task = progress.add_task(
                "[cyan]Fetching item details...", total=len(chunks)
            )

            with ThreadPoolExecutor(max_workers=max_workers) as ex:
                futures = {
                    ex.submit(self._fetch_item_details, chunk): i
                    for i, chunk in enumerate(chunks)
                }

                for fut in as_completed(futures):
                    results[futures[fut]] = fut.result()
                    progress.advance(task, 1)

        return self._in_input_order(
            items, [details for chunk in results for details in chunk]
        )

    def avatar_catalog_search(
        self,
        *,
        query: AvatarSearchQuery,
        limit: Limit = Limit.TEN,
        cursor: Optional[str] = None
    ) -> Tuple[List[Item], Optional[str]]:
        """
        Search the avatar shop.

        Parameters
        ----------
        query : AvatarSearchQuery
            Search filters.
        limit : Limit, default=Limit.TEN
            Page size.
        cursor : str, optional
            Cursor of the page to fetch.

        Returns
        -------
        tuple(list of Item, str or None)
            Matching items and the cursor of the next page. Pass the items
            to `item_details` for their names and prices.

        Raises
        ------
        ValueError
            If `query.min_price` is greater than `query.max_price`.
        """
        params = query.to_params()
        params["limit"] = limit.value
        if cursor is not None:
            params["cursor"] = cursor

        template = RequestTemplate(
            "GET", AVATAR_CATALOG_SEARCH_API, params=params
        )
        resp = self.make_request(template, requires_auth=False)

        def parse(body: Dict[str, Any]) -> Tuple[List[Item], Optional[str]]:
            items = [
                Item(ItemType(entry["itemType"]), int(entry["id"]))
                for entry in body["data"]
            ]
            return items, body.get("nextPageCursor")

        return self.parse(resp, parse)

    def _details_by_id(
        self,
        item_ids: List[int]
    ) -> Dict[int, ItemDetails]:
        if not item_ids:
            raise ValueError("At least one item id must be provided.")

        items = [Item(ItemType.ASSET, item_id) for item_id in item_ids]
        return {d.item_id: d for d in self.item_details(items=items)}

    def product_id(
        self,
        *,
        item_id: int
    ) -> int:
        """Product id of an asset, needed to purchase it."""
        return self.product_id_bulk(item_ids=[item_id])[0]

    def product_id_bulk(
        self,
        *,
        item_ids: List[int]
    ) -> List[int]:
        """
        Product ids of several assets, in the order of `item_ids`.

        Raises
        ------
        MalformedResponseError
            If Roblox returned no product id for one of the assets.
        """
        details = self._details_by_id(item_ids)

        product_ids = []
        for item_id in item_ids:
            found = details.get(item_id)
            if found is None or found.product_id is None:
                raise MalformedResponseError(
                    f"No product id returned for item {item_id}."
                )
            product_ids.append(found.product_id)

        return product_ids

    def collectible_item_id(
        self,
        *,
        item_id: int
    ) -> str:
        """Collectible item id of a non-tradable limited."""
        return self.collectible_item_id_bulk(item_ids=[item_id])[0]

    def collectible_item_id_bulk(
        self,
        *,
        item_ids: List[int]
    ) -> List[str]:
        """
        Collectible item ids of several assets, in the order of `item_ids`.

        Raises
        ------
        MalformedResponseError
            If one of the assets is not a non-tradable limited.
        """
        details = self._details_by_id(item_ids)

        collectible_ids = []
        for item_id in item_ids:
            found = details.get(item_id)
            if found is None or found.collectible_item_id is None:
                raise MalformedResponseError(
                    f"No collectible item id returned for item {item_id}."
                )
            collectible_ids.append(found.collectible_item_id)

        return collectible_ids
