from typing import Any, Optional


class RoboatError(Exception):
    """
    Base class of every error raised by this package.

    Each instance describes one failed attempt. When the failure came from
    an HTTP response, `status_code` and the parsed JSON `body` (or None if
    the response had no parseable body) are kept so callers and endpoint
    wrappers can inspect what the service actually said.
    """

    message = "Roboat error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        body: Any = None,
    ) -> None:
        super().__init__(message or self.message)
        self.status_code = status_code
        self.body = body


class TooManyRequestsError(RoboatError):
    """Endpoint returned 429. Back off before trying again."""

    message = "Too Many Requests"


class InternalServerError(RoboatError):
    """Endpoint returned 500."""

    message = "Internal Server Error"


class BadRequestError(RoboatError):
    """
    Endpoint returned 400 without embedding a structured error.

    Usually means the server could not process the data sent, either
    because it was in the wrong format or because there was too much of it.
    """

    message = "Bad Request"


class InvalidRoblosecurityError(RoboatError):
    """
    The roblosecurity cookie is invalid or lacks access to the endpoint.

    Also the fallback for a 401 whose error body cannot be parsed.
    Roblox error code 0.
    """

    message = "Invalid Roblosecurity"


class UnknownRobloxError(RoboatError):
    """A structured error carried a Roblox error code with no known meaning."""

    def __init__(
        self,
        code: int,
        message: str = "",
        *,
        status_code: Optional[int] = None,
        body: Any = None,
    ) -> None:
        super().__init__(
            f"Unknown Roblox Error Code {code}: {message}",
            status_code=status_code,
            body=body,
        )
        self.code = code
        self.roblox_message = message


class RoblosecurityNotSetError(RoboatError):
    """An endpoint requiring authentication was called without a cookie."""

    message = "Roblosecurity Not Set"


class UnidentifiedStatusCodeError(RoboatError):
    """Status code that fits no other error of this package."""

    def __init__(self, status_code: int, *, body: Any = None) -> None:
        super().__init__(
            f"Unidentified Status Code {status_code}",
            status_code=status_code,
            body=body,
        )


class MalformedResponseError(RoboatError):
    """A response body could not be parsed into the expected shape."""

    message = "Malformed Response"


class InvalidXcsrfError(RoboatError):
    """
    The request was rejected because its xcsrf token was missing or stale.

    The response carried a fresh token, available as `xcsrf`. Recovered by
    the request executor; it only reaches callers if the single retry is
    rejected the same way.
    """

    def __init__(
        self,
        xcsrf: str,
        *,
        status_code: Optional[int] = 403,
        body: Any = None,
    ) -> None:
        super().__init__(
            "Invalid Xcsrf. New Xcsrf Contained In Error.",
            status_code=status_code,
            body=body,
        )
        self.xcsrf = xcsrf


class XcsrfNotReturnedError(RoboatError):
    """Endpoint returned 403 but did not hand out a new xcsrf token."""

    message = "Missing Xcsrf"


class RequestError(RoboatError):
    """Transport level failure (connection, TLS, timeout)."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"RequestError {detail}")
        self.detail = detail


class PurchaseTradableLimitedError(RoboatError):
    """
    Roblox refused to sell a tradable limited.

    `kind` is one of the `KIND_*` constants; `message` keeps the text
    Roblox sent.
    """

    KIND_PURCHASE_ERROR = "PurchaseError"
    KIND_PRICE_CHANGED = "PriceChanged"
    KIND_CANNOT_BUY_OWN_ITEM = "CannotBuyOwnItem"
    KIND_UNKNOWN = "Unknown"

    def __init__(
        self,
        kind: str,
        message: str = "",
        *,
        status_code: Optional[int] = None,
        body: Any = None,
    ) -> None:
        super().__init__(
            f"{kind}: {message}" if message else kind,
            status_code=status_code,
            body=body,
        )
        self.kind = kind
        self.roblox_message = message


class PurchaseNonTradableLimitedError(RoboatError):
    """
    Roblox refused to sell a non-tradable (UGC) limited.

    `kind` is one of the `KIND_*` constants; `message` keeps the text
    Roblox sent.
    """

    KIND_PRICE_MISMATCH = "PriceMismatch"
    KIND_SOLD_OUT = "SoldOut"
    KIND_NOT_FOR_SALE = "NotForSale"
    KIND_INSUFFICIENT_FUNDS = "InsufficientFunds"
    KIND_UNKNOWN = "Unknown"

    def __init__(
        self,
        kind: str,
        message: str = "",
        *,
        status_code: Optional[int] = None,
        body: Any = None,
    ) -> None:
        super().__init__(
            f"{kind}: {message}" if message else kind,
            status_code=status_code,
            body=body,
        )
        self.kind = kind
        self.roblox_message = message
