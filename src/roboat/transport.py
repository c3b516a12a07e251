from typing import Any, Dict, Optional
from .errors import RequestError
import requests


# Header carrying the anti-forgery token, both in requests and responses.
XCSRF_HEADER = "x-csrf-token"

# Name of the session cookie holding the roblosecurity.
ROBLOSECURITY_COOKIE = ".ROBLOSECURITY"

# Some endpoints reject requests that do not look like they come from a
# browser.
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:101.0) "
    "Gecko/20100101 Firefox/101.0"
)
CONTENT_TYPE = "application/json;charset=utf-8"

DEFAULT_TIMEOUT = 30.0


def send(
    http: requests.Session,
    *,
    method: str,
    url: str,
    headers: Dict[str, str],
    json: Any = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> requests.Response:
    """
    Send one HTTP request through the given `requests.Session`.

    Parameters
    ----------
    http : requests.Session
        Session used as the transport (connection pooling, proxies).
    method : str
        HTTP method.
    url : str
        Full endpoint URL.
    headers : dict
        Final request headers, credential and token included.
    json : Any, optional
        JSON body.
    params : dict, optional
        Query parameters.
    timeout : float, optional
        Transport timeout in seconds.

    Returns
    -------
    requests.Response
        The response, whatever its status code.

    Raises
    ------
    RequestError
        On connection, TLS or timeout failures.
    """
    try:
        return http.request(
            method,
            url,
            headers=headers,
            json=json,
            params=params,
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        raise RequestError(str(e)) from e
