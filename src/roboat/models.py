from dataclasses import dataclass
from enum import Enum


class Limit(Enum):
    """
    Page size accepted by paged Roblox endpoints.

    Roblox only accepts these values for the `limit` query parameter, which
    is why this is an enum rather than a plain integer.
    """

    TEN = 10
    TWENTY_FIVE = 25
    FIFTY = 50
    HUNDRED = 100


@dataclass(frozen=True)
class User:
    """A Roblox user as returned by most endpoints."""

    user_id: int
    username: str
    display_name: str
