from ..base_client import BaseAPIClient, RequestTemplate


UNREAD_CONVERSATION_COUNT_API = (
    "https://chat.roblox.com/v2/get-unread-conversation-count"
)


class ChatAPI(BaseAPIClient):
    """Provides access to endpoints under https://chat.roblox.com."""

    def unread_conversation_count(self) -> int:
        """Number of chat conversations with unread messages."""
        template = RequestTemplate("GET", UNREAD_CONVERSATION_COUNT_API)
        resp = self.make_request(template)

        return self.parse(resp, lambda body: int(body["count"]))
