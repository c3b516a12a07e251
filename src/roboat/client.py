from typing import Optional
from .endpoints import (
    PrivateMessagesAPI,
    PresenceAPI,
    EconomyAPI,
    CatalogAPI,
    Bedev2API,
    GroupsAPI,
    TradesAPI,
    UsersAPI,
    ChatAPI,
)
from .transport import DEFAULT_TIMEOUT
from .auth import SessionState, XcsrfRefresher
import requests
import os


class Client:
    """
    Central entry point for all Roblox API modules.
    Aggregates sub-clients such as UsersAPI, EconomyAPI, etc.

    Parameters
    ----------
    roblosecurity : str, optional
        Value of the `.ROBLOSECURITY` cookie. Endpoints that need
        authentication raise `RoblosecurityNotSetError` without it.
    http : requests.Session, optional
        Transport shared by every sub-client. A new session is created
        when omitted.
    timeout : float, optional
        Transport timeout in seconds.
    user_agent : str, optional
        User-Agent header set on the session.
    """

    def __init__(
        self,
        *,
        roblosecurity: Optional[str] = None,
        http: Optional[requests.Session] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None
    ) -> None:
        self.http = http if http is not None else requests.Session()
        if user_agent:
            self.http.headers["User-Agent"] = user_agent

        self.session_state = SessionState(roblosecurity)
        self.refresher = XcsrfRefresher(
            session_state=self.session_state,
            http=self.http,
            timeout=timeout,
        )

        shared = dict(
            session_state=self.session_state,
            http=self.http,
            refresher=self.refresher,
            timeout=timeout,
        )

        # Sub-clients share the same SessionState instance
        self.users = UsersAPI(**shared)
        self.economy = EconomyAPI(**shared)
        self.catalog = CatalogAPI(**shared)
        self.groups = GroupsAPI(**shared)
        self.trades = TradesAPI(**shared)
        self.chat = ChatAPI(**shared)
        self.presence = PresenceAPI(**shared)
        self.private_messages = PrivateMessagesAPI(**shared)
        self.bedev2 = Bedev2API(**shared)

    @classmethod
    def from_env(cls) -> "Client":
        """
        Build a client from environment variables.

        Reads `ROBOAT_ROBLOSECURITY`, `ROBOAT_USER_AGENT` and
        `ROBOAT_TIMEOUT` (seconds, defaults to 30). All are optional.

        Raises
        ------
        ValueError
            If `ROBOAT_TIMEOUT` is not a number.
        """
        raw_timeout = os.getenv("ROBOAT_TIMEOUT")
        timeout = DEFAULT_TIMEOUT

        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(
                    f"ROBOAT_TIMEOUT must be a number of seconds, "
                    f"got {raw_timeout!r}."
                ) from None

        return cls(
            roblosecurity=os.getenv("ROBOAT_ROBLOSECURITY") or None,
            timeout=timeout,
            user_agent=os.getenv("ROBOAT_USER_AGENT") or None,
        )

    @property
    def roblosecurity(self) -> Optional[str]:
        return self.session_state.get_roblosecurity()

    @property
    def xcsrf(self) -> Optional[str]:
        """Current xcsrf token, None until one has been obtained."""
        return self.session_state.get_xcsrf()

    def set_roblosecurity(
        self,
        roblosecurity: Optional[str]
    ) -> None:
        """
        Replace the cookie used by every sub-client.

        The cached authenticated user is dropped, so the next call that
        needs the user id fetches it again.
        """
        self.session_state.set_roblosecurity(roblosecurity)

    def force_refresh_xcsrf(self) -> str:
        """
        Fetch a new xcsrf token even if one is already stored.

        Concurrent callers share a single request.
        """
        return self.refresher.refresh(force=True)


class ClientBuilder:
    """
    Step by step construction of a `Client`.

    Examples
    --------
    >>> client = (
    ...     ClientBuilder()
    ...     .roblosecurity("cookie")
    ...     .timeout(10)
    ...     .build()
    ... )
    """

    def __init__(self) -> None:
        self._roblosecurity: Optional[str] = None
        self._user_agent: Optional[str] = None
        self._timeout: Optional[float] = DEFAULT_TIMEOUT
        self._http: Optional[requests.Session] = None

    def roblosecurity(self, roblosecurity: str) -> "ClientBuilder":
        self._roblosecurity = roblosecurity
        return self

    def user_agent(self, user_agent: str) -> "ClientBuilder":
        self._user_agent = user_agent
        return self

    def timeout(self, timeout: float) -> "ClientBuilder":
        if timeout is not None and timeout <= 0:
            raise ValueError("Timeout must be a positive number of seconds.")
        self._timeout = timeout
        return self

    def http(self, http: requests.Session) -> "ClientBuilder":
        self._http = http
        return self

    def build(self) -> Client:
        return Client(
            roblosecurity=self._roblosecurity,
            http=self._http,
            timeout=self._timeout,
            user_agent=self._user_agent,
        )
