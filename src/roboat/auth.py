from typing import Dict, Optional
from concurrent.futures import Future
from .validation import classify_response, header_value
from .errors import XcsrfNotReturnedError
from .logger import get_logger
from .models import User
from .transport import (
    DEFAULT_TIMEOUT,
    ROBLOSECURITY_COOKIE,
    XCSRF_HEADER,
    send,
)
from threading import Lock
import requests


def auth_headers(
    roblosecurity: Optional[str],
    xcsrf: Optional[str]
) -> Dict[str, str]:
    """Cookie and xcsrf headers for the given credential and token."""
    headers = {}
    if roblosecurity:
        headers["Cookie"] = f"{ROBLOSECURITY_COOKIE}={roblosecurity}"
    if xcsrf:
        headers[XCSRF_HEADER] = xcsrf
    return headers


class SessionState:
    """
    Mutable authentication state shared by every sub-client of a `Client`.

    Holds:
    - the roblosecurity cookie (replaced wholesale, never edited in place),
    - the current xcsrf token,
    - the cached authenticated user, cleared whenever the cookie changes.

    All reads and writes go through one lock owned by the instance, so two
    clients with different cookies never share state.
    """

    def __init__(
        self,
        roblosecurity: Optional[str] = None,
        *,
        xcsrf: Optional[str] = None
    ) -> None:
        self._lock = Lock()
        self._roblosecurity = roblosecurity
        self._xcsrf = xcsrf
        self._user: Optional[User] = None

    def get_roblosecurity(self) -> Optional[str]:
        with self._lock:
            return self._roblosecurity

    def set_roblosecurity(
        self,
        roblosecurity: Optional[str]
    ) -> None:
        """Replace the cookie and forget the cached authenticated user."""
        with self._lock:
            self._roblosecurity = roblosecurity
            self._user = None

    def get_xcsrf(self) -> Optional[str]:
        with self._lock:
            return self._xcsrf

    def set_xcsrf(
        self,
        xcsrf: str
    ) -> None:
        with self._lock:
            self._xcsrf = xcsrf

    def cached_user(self) -> Optional[User]:
        with self._lock:
            return self._user

    def cache_user(
        self,
        user: User,
        roblosecurity: Optional[str]
    ) -> bool:
        """
        Cache the authenticated user fetched with `roblosecurity`.

        Returns
        -------
        bool
            False if the cookie was replaced while the user was being
            fetched, in which case nothing is cached.
        """
        with self._lock:
            if roblosecurity != self._roblosecurity:
                return False
            self._user = user
            return True


class XcsrfRefresher:
    """
    Obtains fresh xcsrf tokens from Roblox.

    Roblox hands out a new token with every 403 it returns for a request
    carrying a missing or stale token. The logout endpoint is used because
    it does exactly that without logging the session out when the token is
    absent.

    Concurrent callers share a single in-flight refresh: the first caller
    performs the request, later callers wait for its outcome and receive
    the same token or the same exception.
    """

    REFRESH_URL = "https://auth.roblox.com/v2/logout"

    def __init__(
        self,
        *,
        session_state: SessionState,
        http: requests.Session,
        timeout: Optional[float] = DEFAULT_TIMEOUT
    ) -> None:
        self.session_state = session_state
        self.http = http
        self.timeout = timeout
        self.logger = get_logger("roboat.auth")

        self._lock = Lock()
        self._inflight: Optional[Future] = None

    def _fetch(self) -> str:
        """
        Request a new token from the refresh endpoint.

        Raises
        ------
        XcsrfNotReturnedError
            If Roblox answered without a token.
        RoboatError
            Any other classified failure (invalid cookie, rate limit...).
        """
        headers = auth_headers(self.session_state.get_roblosecurity(), None)

        resp = send(
            self.http,
            method="POST",
            url=self.REFRESH_URL,
            headers=headers,
            timeout=self.timeout,
        )

        xcsrf = header_value(resp.headers, XCSRF_HEADER)
        if xcsrf and (resp.status_code == 403 or resp.ok):
            return xcsrf

        error = classify_response(resp)
        if error is None:
            error = XcsrfNotReturnedError(status_code=resp.status_code)
        raise error

    def refresh(
        self,
        stale: Optional[str] = None,
        force: bool = False
    ) -> str:
        """
        Return a fresh xcsrf token, storing it in the session state.

        Parameters
        ----------
        stale : str, optional
            Token the caller just saw rejected (None if it sent none). If
            the session already holds a different token, someone else
            refreshed in the meantime and that token is returned without a
            request.
        force : bool, default=False
            Skip the check above and always obtain a new token (an
            in-flight refresh is still shared).

        Returns
        -------
        str
            The new token.
        """
        with self._lock:
            # Re-check under the lock to avoid a duplicate refresh.
            if not force:
                current = self.session_state.get_xcsrf()
                if current is not None and current != stale:
                    return current

            future = self._inflight
            leader = future is None
            if leader:
                future = Future()
                self._inflight = future

        if not leader:
            return future.result()

        self.logger.info("Refreshing xcsrf token.")
        try:
            xcsrf = self._fetch()
            self.session_state.set_xcsrf(xcsrf)
        except BaseException as e:
            # Waiters must be released even on KeyboardInterrupt/SystemExit.
            self.logger.error(f"Xcsrf refresh failed: {e!r}")
            future.set_exception(e)
            raise
        else:
            future.set_result(xcsrf)
        finally:
            with self._lock:
                self._inflight = None

        self.logger.info("Xcsrf token refreshed.")
        return xcsrf
