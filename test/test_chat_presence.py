from roboat.endpoints.presence import REGISTER_PRESENCE_API, PresenceAPI
from roboat.endpoints.chat import ChatAPI
from roboat.errors import MalformedResponseError
from unittest.mock import patch
import pytest


@patch.object(ChatAPI, "make_request")
def test_unread_conversation_count(mock_make, api_kwargs, make_response):
    mock_make.return_value = make_response(200, {"count": 3})

    chat = ChatAPI(**api_kwargs)

    assert chat.unread_conversation_count() == 3
    mock_make.assert_called_once()


@patch.object(ChatAPI, "make_request")
def test_unread_conversation_count_malformed(
    mock_make,
    api_kwargs,
    make_response
):
    mock_make.return_value = make_response(200, {"unread": 3})

    chat = ChatAPI(**api_kwargs)

    with pytest.raises(MalformedResponseError):
        chat.unread_conversation_count()


def test_register_presence(api_kwargs, http, session_state, make_response):
    """
    A POST without a token is rejected once, then retried with the token
    handed out by Roblox.
    """
    http.request.side_effect = [
        make_response(403, None, {"x-csrf-token": "T"}),
        make_response(200, {}),
    ]

    PresenceAPI(**api_kwargs).register_presence()

    args, kwargs = http.request.call_args
    assert args == ("POST", REGISTER_PRESENCE_API)
    assert kwargs["json"] == {"location": "Home"}
    assert kwargs["headers"]["x-csrf-token"] == "T"
    assert session_state.get_xcsrf() == "T"
