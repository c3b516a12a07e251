from .errors import (
    PurchaseNonTradableLimitedError,
    PurchaseTradableLimitedError,
    UnidentifiedStatusCodeError,
    InvalidRoblosecurityError,
    RoblosecurityNotSetError,
    MalformedResponseError,
    XcsrfNotReturnedError,
    TooManyRequestsError,
    InternalServerError,
    UnknownRobloxError,
    InvalidXcsrfError,
    BadRequestError,
    RequestError,
    RoboatError,
)
from .client import Client, ClientBuilder
from .models import Limit, User

__all__ = [
    "Client",
    "ClientBuilder",
    "Limit",
    "User",
    "RoboatError",
    "TooManyRequestsError",
    "InternalServerError",
    "BadRequestError",
    "InvalidRoblosecurityError",
    "UnknownRobloxError",
    "RoblosecurityNotSetError",
    "UnidentifiedStatusCodeError",
    "MalformedResponseError",
    "InvalidXcsrfError",
    "XcsrfNotReturnedError",
    "RequestError",
    "PurchaseTradableLimitedError",
    "PurchaseNonTradableLimitedError",
]
