from typing import Any, Dict, List, Optional, Tuple
from ..base_client import BaseAPIClient, RequestTemplate
from dateutil.parser import isoparse
from ..models import Limit, User
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


TRADES_API = "https://trades.roblox.com/v1/trades/{trade_type}"


class TradeType(Enum):
    INBOUND = "Inbound"
    OUTBOUND = "Outbound"
    COMPLETED = "Completed"
    INACTIVE = "Inactive"


@dataclass(frozen=True)
class Trade:
    """Summary of a trade, as listed by `TradesAPI.trades`."""

    trade_id: int
    partner: User
    created_at: datetime
    is_active: bool
    status: str


class TradesAPI(BaseAPIClient):
    """Provides access to endpoints under https://trades.roblox.com."""

    def trades(
        self,
        *,
        trade_type: TradeType,
        limit: Limit = Limit.TEN,
        cursor: Optional[str] = None
    ) -> Tuple[List[Trade], Optional[str]]:
        """
        List trades of the authenticated user, newest first.

        Parameters
        ----------
        trade_type : TradeType
            Which trade box to list.
        limit : Limit, default=Limit.TEN
            Page size.
        cursor : str, optional
            Cursor of the page to fetch.

        Returns
        -------
        tuple(list of Trade, str or None)
            Trades and the cursor of the next page.
        """
        params = {
            "limit": limit.value,
            "cursor": cursor,
            "sortOrder": "Desc",
        }
        params = {k: v for k, v in params.items() if v is not None}

        template = RequestTemplate(
            "GET",
            TRADES_API.format(trade_type=trade_type.value),
            params=params,
        )
        resp = self.make_request(template)

        def parse(body: Dict[str, Any]) -> Tuple[List[Trade], Optional[str]]:
            trades = [
                Trade(
                    trade_id=int(t["id"]),
                    partner=User(
                        user_id=int(t["user"]["id"]),
                        username=t["user"]["name"],
                        display_name=t["user"]["displayName"],
                    ),
                    created_at=isoparse(t["created"]),
                    is_active=bool(t["isActive"]),
                    status=t["status"],
                )
                for t in body["data"]
            ]
            return trades, body.get("nextPageCursor")

        return self.parse(resp, parse)
