from .private_messages import PrivateMessagesAPI
from .presence import PresenceAPI
from .economy import EconomyAPI
from .catalog import CatalogAPI
from .bedev2 import Bedev2API
from .groups import GroupsAPI
from .trades import TradesAPI
from .users import UsersAPI
from .chat import ChatAPI

__all__ = [
    "PrivateMessagesAPI",
    "PresenceAPI",
    "EconomyAPI",
    "CatalogAPI",
    "Bedev2API",
    "GroupsAPI",
    "TradesAPI",
    "UsersAPI",
    "ChatAPI",
]
