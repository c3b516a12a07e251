from ..base_client import BaseAPIClient, RequestTemplate


REGISTER_PRESENCE_API = (
    "https://presence.roblox.com/v1/presence/register-app-presence"
)


class PresenceAPI(BaseAPIClient):
    """Provides access to endpoints under https://presence.roblox.com."""

    def register_presence(self) -> None:
        """
        Mark the authenticated user as online on the website.

        Roblox shows a user as online for a short while after this call,
        so it has to be repeated periodically to stay online.
        """
        template = RequestTemplate(
            "POST", REGISTER_PRESENCE_API, json={"location": "Home"}
        )
        self.make_request(template)
