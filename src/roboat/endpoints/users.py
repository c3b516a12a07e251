from typing import Any, Dict, List, Optional, Tuple
from ..base_client import BaseAPIClient, RequestTemplate
from dateutil.parser import isoparse
from ..models import Limit, User
from dataclasses import dataclass
from datetime import datetime


USER_DETAILS_API = "https://users.roblox.com/v1/users/{user_id}"
USER_SEARCH_API = "https://users.roblox.com/v1/users/search"
USERNAME_USER_DETAILS_API = "https://users.roblox.com/v1/usernames/users"


@dataclass(frozen=True)
class UserDetails:
    """Public profile of a user."""

    user_id: int
    username: str
    display_name: str
    description: str
    is_banned: bool
    has_verified_badge: bool
    created_at: datetime


@dataclass(frozen=True)
class UsernameUserDetails:
    """Result of resolving one username."""

    requested_username: str
    user_id: int
    username: str
    display_name: str
    has_verified_badge: bool


class UsersAPI(BaseAPIClient):
    """
    Provides access to endpoints under https://users.roblox.com.

    The `user_id`, `username` and `display_name` methods read the
    authenticated user, which is fetched once and then cached in the
    shared session state until the roblosecurity is replaced.
    """

    def user_id(self) -> int:
        """
        User id of the authenticated user.

        Raises
        ------
        RoblosecurityNotSetError
            If no roblosecurity is set.
        """
        return self.resolved_identity()

    def username(self) -> str:
        """Username of the authenticated user."""
        return self.authenticated_user().username

    def display_name(self) -> str:
        """Display name of the authenticated user."""
        return self.authenticated_user().display_name

    def user_details(
        self,
        *,
        user_id: int
    ) -> UserDetails:
        """
        Retrieve the public profile of a user.

        Parameters
        ----------
        user_id : int
            Id of the user.

        Returns
        -------
        UserDetails
            Profile data; `created_at` is timezone aware.
        """
        template = RequestTemplate(
            "GET", USER_DETAILS_API.format(user_id=user_id)
        )
        resp = self.make_request(template, requires_auth=False)

        def parse(body: Dict[str, Any]) -> UserDetails:
            return UserDetails(
                user_id=int(body["id"]),
                username=body["name"],
                display_name=body["displayName"],
                description=body.get("description") or "",
                is_banned=bool(body.get("isBanned", False)),
                has_verified_badge=bool(body.get("hasVerifiedBadge", False)),
                created_at=isoparse(body["created"]),
            )

        return self.parse(resp, parse)

    def user_search(
        self,
        *,
        keyword: str,
        limit: Limit = Limit.TEN,
        cursor: Optional[str] = None
    ) -> Tuple[List[User], Optional[str]]:
        """
        Search users by keyword.

        Parameters
        ----------
        keyword : str
            Search term (part of a username or display name).
        limit : Limit, default=Limit.TEN
            Page size.
        cursor : str, optional
            Cursor returned by a previous call, to fetch the next page.

        Returns
        -------
        tuple(list of User, str or None)
            Matching users and the cursor of the next page (None on the
            last page).

        Raises
        ------
        ValueError
            If `keyword` is empty.
        """
        if not keyword or not keyword.strip():
            raise ValueError("A non-empty keyword must be provided.")

        params = {
            "keyword": keyword.strip(),
            "limit": limit.value,
            "cursor": cursor,
        }
        params = {k: v for k, v in params.items() if v is not None}

        template = RequestTemplate("GET", USER_SEARCH_API, params=params)
        resp = self.make_request(template, requires_auth=False)

        def parse(body: Dict[str, Any]) -> Tuple[List[User], Optional[str]]:
            users = [
                User(
                    user_id=int(u["id"]),
                    username=u["name"],
                    display_name=u["displayName"],
                )
                for u in body["data"]
            ]
            return users, body.get("nextPageCursor")

        return self.parse(resp, parse)

    def username_user_details(
        self,
        *,
        usernames: List[str],
        exclude_banned_users: bool = False
    ) -> List[UsernameUserDetails]:
        """
        Resolve usernames to user ids.

        Parameters
        ----------
        usernames : list of str
            Usernames to resolve (max 100).
        exclude_banned_users : bool, default=False
            Leave banned users out of the result.

        Returns
        -------
        list of UsernameUserDetails
            One entry per username Roblox could resolve; unknown usernames
            are silently left out.

        Raises
        ------
        ValueError
            If no usernames are given or more than 100 are passed.
        """
        if not usernames:
            raise ValueError("At least one username must be provided.")

        if len(usernames) > 100:
            raise ValueError("Maximum 100 usernames allowed per request.")

        template = RequestTemplate(
            "POST",
            USERNAME_USER_DETAILS_API,
            json={
                "usernames": [name.strip() for name in usernames],
                "excludeBannedUsers": exclude_banned_users,
            },
        )
        resp = self.make_request(template, requires_auth=False)

        return self.parse(
            resp,
            lambda body: [
                UsernameUserDetails(
                    requested_username=u["requestedUsername"],
                    user_id=int(u["id"]),
                    username=u["name"],
                    display_name=u["displayName"],
                    has_verified_badge=bool(u.get("hasVerifiedBadge", False)),
                )
                for u in body["data"]
            ],
        )
