"""
Classification of HTTP outcomes into the error taxonomy of this package.

Everything here is a pure function of response data (status code, parsed
body, headers), so it can be exercised against literal fixtures without a
network.
"""
from typing import Any, Callable, Mapping, Optional, Tuple
from .transport import XCSRF_HEADER
from .errors import (
    BadRequestError,
    InternalServerError,
    InvalidRoblosecurityError,
    InvalidXcsrfError,
    MalformedResponseError,
    RoboatError,
    TooManyRequestsError,
    UnidentifiedStatusCodeError,
    UnknownRobloxError,
    XcsrfNotReturnedError,
)
import requests


# Hook supplied by endpoint wrappers to claim endpoint specific error bodies.
DomainErrors = Callable[[int, Any], Optional[RoboatError]]


def roblox_error(body: Any) -> Optional[Tuple[int, str]]:
    """
    Extract the first structured Roblox error from a response body.

    Roblox embeds errors as ``{"errors": [{"code": 0, "message": "..."}]}``.

    Returns
    -------
    tuple(int, str) or None
        The error code and message, or None if the body holds no
        structured error.
    """
    if not isinstance(body, dict):
        return None

    errors = body.get("errors")
    if not isinstance(errors, list) or not errors:
        return None

    first = errors[0]
    if not isinstance(first, dict):
        return None

    code = first.get("code")
    # bool is an int subclass, and never a valid error code.
    if not isinstance(code, int) or isinstance(code, bool):
        return None

    message = first.get("message")
    return code, message if isinstance(message, str) else ""


def header_value(
    headers: Optional[Mapping[str, str]],
    name: str
) -> Optional[str]:
    """Case-insensitive header lookup that also accepts plain dicts."""
    if not headers:
        return None

    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, val in headers.items():
            if key.lower() == lowered:
                value = val
                break

    return value or None


def classify(
    status_code: int,
    body: Any = None,
    headers: Optional[Mapping[str, str]] = None,
    domain_errors: Optional[DomainErrors] = None,
) -> Optional[RoboatError]:
    """
    Map a response to one error of the taxonomy.

    Parameters
    ----------
    status_code : int
        HTTP status code of the response.
    body : Any, optional
        Parsed JSON body, or None when absent or unparseable.
    headers : mapping, optional
        Response headers.
    domain_errors : callable, optional
        Endpoint specific hook returning an error for bodies it recognizes,
        or None to fall through to the generic rules.

    Returns
    -------
    RoboatError or None
        The error describing the response, or None for 2xx responses.

    Notes
    -----
    Rules are evaluated in order: 429, 500, 400 without structured error,
    401, 403, endpoint specific errors, 400 with an unclaimed structured
    error, then anything else as an unidentified status.
    """
    if 200 <= status_code < 300:
        return None

    if status_code == 429:
        return TooManyRequestsError(status_code=status_code, body=body)

    if status_code == 500:
        return InternalServerError(status_code=status_code, body=body)

    error = roblox_error(body)

    if status_code == 400 and error is None:
        return BadRequestError(status_code=status_code, body=body)

    if status_code == 401:
        if error is None or error[0] == 0:
            return InvalidRoblosecurityError(
                status_code=status_code, body=body
            )
        code, message = error
        return UnknownRobloxError(
            code, message, status_code=status_code, body=body
        )

    if status_code == 403:
        xcsrf = header_value(headers, XCSRF_HEADER)
        if xcsrf:
            return InvalidXcsrfError(
                xcsrf, status_code=status_code, body=body
            )
        return XcsrfNotReturnedError(status_code=status_code, body=body)

    if domain_errors is not None:
        domain_error = domain_errors(status_code, body)
        if domain_error is not None:
            return domain_error

    if status_code == 400:
        code, message = error
        return UnknownRobloxError(
            code, message, status_code=status_code, body=body
        )

    return UnidentifiedStatusCodeError(status_code, body=body)


def read_body(response: requests.Response) -> Any:
    """Parsed JSON body of a response, or None if it has none."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def parse_json(response: requests.Response) -> Any:
    """
    Parse the JSON body of a response that is expected to have one.

    Raises
    ------
    MalformedResponseError
        If the body is empty or not valid JSON.
    """
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Malformed Response: {e}",
            status_code=response.status_code,
        ) from e


def classify_response(
    response: requests.Response,
    domain_errors: Optional[DomainErrors] = None,
) -> Optional[RoboatError]:
    """Shortcut for `classify` on a `requests.Response`."""
    return classify(
        response.status_code,
        read_body(response),
        response.headers,
        domain_errors,
    )
