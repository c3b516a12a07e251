from typing import Any, Callable, Mapping, Optional, TypeVar
from dataclasses import dataclass, field, replace
from .auth import SessionState, XcsrfRefresher, auth_headers
from .validation import (
    DomainErrors,
    classify_response,
    header_value,
    parse_json,
)
from .errors import (
    InvalidXcsrfError,
    MalformedResponseError,
    RequestError,
    RoblosecurityNotSetError,
    TooManyRequestsError,
    XcsrfNotReturnedError,
)
from .transport import DEFAULT_TIMEOUT, XCSRF_HEADER, send
from types import MappingProxyType
from .logger import get_logger
from .models import User
import requests

T = TypeVar("T")


@dataclass(frozen=True)
class RequestTemplate:
    """
    Description of one request, built by an endpoint wrapper.

    Headers must not contain the cookie or the xcsrf token; those are added
    by `BaseAPIClient.make_request` on every attempt. Templates are
    immutable, so the same template can be sent again for a retry.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    json: Any = None
    params: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "headers", MappingProxyType(dict(self.headers))
        )
        if self.params is not None:
            object.__setattr__(
                self, "params", MappingProxyType(dict(self.params))
            )

    def with_headers(
        self,
        headers: Mapping[str, str]
    ) -> "RequestTemplate":
        """Copy of this template with extra headers merged in."""
        return replace(self, headers={**self.headers, **headers})


class BaseAPIClient:
    """
    Base HTTP client for Roblox API endpoints.

    Every endpoint wrapper goes through `make_request`, which attaches the
    roblosecurity cookie and the current xcsrf token, classifies failures
    and, when Roblox rejects the token, retries the request exactly once
    with a fresh one. Intended for inheritance by the per-API clients
    (e.g., UsersAPI, EconomyAPI, etc.), which all share the same
    `SessionState`, transport and refresher.

    Attributes
    ----------
    session_state : SessionState
        Cookie, xcsrf token and cached authenticated user.
    http : requests.Session
        Transport used for every request.
    refresher : XcsrfRefresher
        Single-flight xcsrf refresher shared by all sub-clients.
    timeout : float, optional
        Transport timeout in seconds.
    """

    AUTHENTICATED_USER_API = "https://users.roblox.com/v1/users/authenticated"

    def __init__(
        self,
        *,
        session_state: SessionState,
        http: requests.Session,
        refresher: XcsrfRefresher,
        timeout: Optional[float] = DEFAULT_TIMEOUT
    ) -> None:
        self.session_state = session_state
        self.http = http
        self.refresher = refresher
        self.timeout = timeout
        self.logger = get_logger("roboat.client")

    def _send(
        self,
        template: RequestTemplate,
        xcsrf: Optional[str]
    ) -> requests.Response:
        """Send the template once with the given token attached."""
        template = template.with_headers(
            auth_headers(self.session_state.get_roblosecurity(), xcsrf)
        )

        params = dict(template.params) if template.params is not None else None

        try:
            return send(
                self.http,
                method=template.method,
                url=template.url,
                headers=dict(template.headers),
                json=template.json,
                params=params,
                timeout=self.timeout,
            )
        except RequestError as e:
            self.logger.error(
                f"{template.method} {template.url} failed: {e.detail}"
            )
            raise

    def make_request(
        self,
        template: RequestTemplate,
        *,
        requires_auth: bool = True,
        domain_errors: Optional[DomainErrors] = None
    ) -> requests.Response:
        """
        Execute a request with automatic xcsrf handling.

        Parameters
        ----------
        template : RequestTemplate
            Request to send.
        requires_auth : bool, default=True
            Fail fast with `RoblosecurityNotSetError` if no cookie is set.
        domain_errors : callable, optional
            Endpoint specific error mapping, see `validation.classify`.

        Returns
        -------
        requests.Response
            The successful (2xx) response.

        Raises
        ------
        RoboatError
            The classified failure of the last attempt.

        Notes
        -----
        At most two requests are sent. If the first is rejected for its
        xcsrf token, the new token is stored (or obtained through the
        refresher when Roblox did not hand one out) and the request is
        sent once more with the token read back from the session state.
        Whatever the second attempt yields is final.
        """
        if requires_auth and not self.session_state.get_roblosecurity():
            raise RoblosecurityNotSetError()

        xcsrf = self.session_state.get_xcsrf()

        for attempt in range(2):
            resp = self._send(template, xcsrf)

            error = classify_response(resp, domain_errors)
            if error is None:
                fresh = header_value(resp.headers, XCSRF_HEADER)
                if fresh and fresh != xcsrf:
                    self.session_state.set_xcsrf(fresh)
                return resp

            if isinstance(error, InvalidXcsrfError):
                self.session_state.set_xcsrf(error.xcsrf)

            # No third attempt.
            if attempt > 0:
                raise error

            if isinstance(error, InvalidXcsrfError):
                self.logger.warning(
                    f"Xcsrf rejected by {template.url}, retrying with the "
                    "token returned."
                )
            elif isinstance(error, XcsrfNotReturnedError):
                self.logger.warning(
                    f"Xcsrf rejected by {template.url} without a new one, "
                    "refreshing."
                )
                self.refresher.refresh(stale=xcsrf)
            else:
                if isinstance(error, TooManyRequestsError):
                    self.logger.warning(f"Rate limited by {template.url}.")
                raise error

            xcsrf = self.session_state.get_xcsrf()

        raise RuntimeError("Retry mechanism reached an invalid state.")

    def parse(
        self,
        resp: requests.Response,
        parser: Callable[[Any], T]
    ) -> T:
        """
        Parse the JSON body of `resp` with `parser`.

        Any KeyError, IndexError, TypeError or ValueError raised while
        parsing means the body did not have the expected shape and is
        reported as `MalformedResponseError`.
        """
        body = parse_json(resp)
        try:
            return parser(body)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise MalformedResponseError(
                f"Malformed Response: {e!r}",
                status_code=resp.status_code,
                body=body,
            ) from e

    def authenticated_user(self) -> User:
        """
        Return the user the roblosecurity belongs to.

        Fetched once and cached in the session state until the cookie is
        replaced.

        Raises
        ------
        RoblosecurityNotSetError
            If no cookie is set.
        """
        user = self.session_state.cached_user()
        if user is not None:
            return user

        roblosecurity = self.session_state.get_roblosecurity()

        resp = self.make_request(
            RequestTemplate("GET", self.AUTHENTICATED_USER_API)
        )

        user = self.parse(
            resp,
            lambda body: User(
                user_id=int(body["id"]),
                username=body["name"],
                display_name=body["displayName"],
            ),
        )

        self.session_state.cache_user(user, roblosecurity)
        return user

    def resolved_identity(self) -> int:
        """User id of the authenticated user (cached)."""
        return self.authenticated_user().user_id
