from requests.structures import CaseInsensitiveDict
from roboat.auth import SessionState, XcsrfRefresher
from unittest.mock import MagicMock
from roboat.models import User
import requests
import pytest
import json


def build_response(
    status_code,
    json_body=None,
    headers=None,
    content=None
):
    """
    Build a real requests.Response without touching the network.
    """
    resp = requests.Response()
    resp.status_code = status_code
    if json_body is not None:
        resp._content = json.dumps(json_body).encode("utf-8")
    else:
        resp._content = content if content is not None else b""
    resp.headers = CaseInsensitiveDict(headers or {})
    resp.encoding = "utf-8"
    resp.url = "https://example.roblox.com"
    return resp


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def http():
    """
    Provide a mocked requests.Session; tests stub `http.request`.
    """
    return MagicMock()


@pytest.fixture
def session_state():
    return SessionState("cookie")


@pytest.fixture
def refresher(session_state, http):
    return XcsrfRefresher(session_state=session_state, http=http, timeout=5)


@pytest.fixture
def api_kwargs(session_state, http, refresher):
    """
    Keyword arguments shared by every sub-client under test.
    """
    return dict(
        session_state=session_state,
        http=http,
        refresher=refresher,
        timeout=5,
    )


@pytest.fixture
def logged_in(session_state):
    """
    Cache the authenticated user so endpoints needing the user id do not
    issue an extra request.
    """
    user = User(user_id=1, username="builderman", display_name="Builderman")
    session_state.cache_user(user, "cookie")
    return user
