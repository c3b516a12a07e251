from typing import Any, Dict, List, Tuple
from ..base_client import BaseAPIClient, RequestTemplate
from dateutil.parser import isoparse
from dataclasses import dataclass
from datetime import datetime
from ..models import User
from enum import Enum


MESSAGES_API = "https://privatemessages.roblox.com/v1/messages"


class MessageTabType(Enum):
    INBOX = "Inbox"
    SENT = "Sent"
    ARCHIVE = "Archive"


@dataclass(frozen=True)
class Message:
    message_id: int
    sender: User
    subject: str
    body: str
    created_at: datetime
    is_read: bool
    is_system_message: bool


@dataclass(frozen=True)
class MessagesPageMetadata:
    """Paging information returned alongside a page of messages."""

    total_message_count: int
    total_pages: int
    page_number: int


class PrivateMessagesAPI(BaseAPIClient):
    """Provides access to endpoints under https://privatemessages.roblox.com."""

    page_size = 20

    def messages(
        self,
        *,
        page: int = 0,
        message_tab: MessageTabType = MessageTabType.INBOX
    ) -> Tuple[List[Message], MessagesPageMetadata]:
        """
        Retrieve one page of private messages.

        Parameters
        ----------
        page : int, default=0
            Zero based page number.
        message_tab : MessageTabType, default=MessageTabType.INBOX
            Mailbox to read.

        Returns
        -------
        tuple(list of Message, MessagesPageMetadata)
            Messages of the page and paging information.

        Raises
        ------
        ValueError
            If `page` is negative.
        """
        if page < 0:
            raise ValueError("Page number must not be negative.")

        template = RequestTemplate(
            "GET",
            MESSAGES_API,
            params={
                "messageTab": message_tab.value,
                "pageNumber": page,
                "pageSize": self.page_size,
            },
        )
        resp = self.make_request(template)

        def parse(
            body: Dict[str, Any]
        ) -> Tuple[List[Message], MessagesPageMetadata]:
            messages = [
                Message(
                    message_id=int(m["id"]),
                    sender=User(
                        user_id=int(m["sender"]["id"]),
                        username=m["sender"]["name"],
                        display_name=m["sender"]["displayName"],
                    ),
                    subject=m["subject"],
                    body=m["body"],
                    created_at=isoparse(m["created"]),
                    is_read=bool(m["isRead"]),
                    is_system_message=bool(m["isSystemMessage"]),
                )
                for m in body["collection"]
            ]
            metadata = MessagesPageMetadata(
                total_message_count=int(body["totalCollectionSize"]),
                total_pages=int(body["totalPages"]),
                page_number=int(body["pageNumber"]),
            )
            return messages, metadata

        return self.parse(resp, parse)
