from typing import Any, Dict, List, Optional, Tuple
from ..base_client import BaseAPIClient, RequestTemplate
from ..models import Limit, User
from dataclasses import dataclass


GROUP_ROLES_API = "https://groups.roblox.com/v1/groups/{group_id}/roles"
GROUP_ROLE_MEMBERS_API = (
    "https://groups.roblox.com/v1/groups/{group_id}/roles/{role_id}/users"
)
SET_GROUP_MEMBER_ROLE_API = (
    "https://groups.roblox.com/v1/groups/{group_id}/users/{user_id}"
)


@dataclass(frozen=True)
class Role:
    """A role of a group. `rank` ranges from 0 (guest) to 255 (owner)."""

    role_id: int
    name: str
    rank: int
    member_count: int


class GroupsAPI(BaseAPIClient):
    """Provides access to endpoints under https://groups.roblox.com."""

    def group_roles(
        self,
        *,
        group_id: int
    ) -> List[Role]:
        """
        Retrieve the roles of a group, sorted by ascending rank.

        Parameters
        ----------
        group_id : int
            Id of the group.

        Returns
        -------
        list of Role
            Roles of the group. The guest role has no members and reports
            a member count of 0.
        """
        template = RequestTemplate(
            "GET", GROUP_ROLES_API.format(group_id=group_id)
        )
        resp = self.make_request(template, requires_auth=False)

        roles = self.parse(
            resp,
            lambda body: [
                Role(
                    role_id=int(r["id"]),
                    name=r["name"],
                    rank=int(r["rank"]),
                    member_count=int(r.get("memberCount") or 0),
                )
                for r in body["roles"]
            ],
        )

        return sorted(roles, key=lambda r: r.rank)

    def group_role_members(
        self,
        *,
        group_id: int,
        role_id: int,
        limit: Limit = Limit.TEN,
        cursor: Optional[str] = None
    ) -> Tuple[List[User], Optional[str]]:
        """
        Retrieve the members holding a role, newest first.

        Parameters
        ----------
        group_id : int
            Id of the group.
        role_id : int
            Id of the role (see `group_roles`).
        limit : Limit, default=Limit.TEN
            Page size.
        cursor : str, optional
            Cursor of the page to fetch.

        Returns
        -------
        tuple(list of User, str or None)
            Members and the cursor of the next page.
        """
        params = {
            "limit": limit.value,
            "cursor": cursor,
            "sortOrder": "Desc",
        }
        params = {k: v for k, v in params.items() if v is not None}

        template = RequestTemplate(
            "GET",
            GROUP_ROLE_MEMBERS_API.format(group_id=group_id, role_id=role_id),
            params=params,
        )
        resp = self.make_request(template, requires_auth=False)

        def parse(body: Dict[str, Any]) -> Tuple[List[User], Optional[str]]:
            members = [
                User(
                    user_id=int(m["userId"]),
                    username=m["username"],
                    display_name=m["displayName"],
                )
                for m in body["data"]
            ]
            return members, body.get("nextPageCursor")

        return self.parse(resp, parse)

    def set_group_member_role(
        self,
        *,
        user_id: int,
        group_id: int,
        role_id: int
    ) -> None:
        """
        Change the role of a group member.

        The authenticated user needs permission to manage ranks in the
        group, and cannot assign a role at or above its own rank.
        """
        template = RequestTemplate(
            "PATCH",
            SET_GROUP_MEMBER_ROLE_API.format(group_id=group_id, user_id=user_id),
            json={"roleId": role_id},
        )
        self.make_request(template)
