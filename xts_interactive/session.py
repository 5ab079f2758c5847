# xts_interactive/session.py
import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlencode

from . import config
from .api_client import APIClient
from .enums import CapabilityTables, build_capability_tables
from .errors import (
    CLIENT_CODE_REQUIRED,
    LOGIN_REQUIRED,
    OK,
    InteractiveError,
    Outcome,
    failed,
)

logger = logging.getLogger("xts_interactive.session")
logger.setLevel(logging.INFO)


@dataclass
class SessionState:
    url: str
    user_id: Optional[str] = None
    token: Optional[str] = None
    source: Optional[str] = None
    is_logged_in: bool = False
    is_investor_client: bool = False
    client_codes: List[str] = field(default_factory=list)
    enums: Dict[str, Any] = field(default_factory=dict)
    capabilities: CapabilityTables = field(default_factory=dict)

    def mark_authenticated(self, user_id: str, token: str, result: Mapping[str, Any], source: Optional[str] = None):
        """Apply a successful login/enums response."""
        self.user_id = user_id
        if source is not None:
            self.source = source
        self.token = token
        self.enums = result.get("enums") or {}
        self.client_codes = list(result.get("clientCodes") or [])
        self.is_investor_client = bool(result.get("isInvestorClient"))
        self.capabilities = build_capability_tables(self.enums)
        self.is_logged_in = True


def returns_error(fallback_message: str):
    """
    Wrap a session operation so that it never raises: any failure comes back
    as an InteractiveError.
    """
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(self, *args, **kwargs):
            try:
                return fn(self, *args, **kwargs)
            except Exception as e:
                err = InteractiveError.from_exception(e, fallback_message)
                logger.info("%s failed: %s (status %s)", fn.__name__, err.message, err.status_code)
                return err
        return wrapper
    return decorator


def _client_id(req: Optional[Mapping[str, Any]]):
    if isinstance(req, Mapping):
        return req.get("clientID")
    return None


def _wire_value(v):
    if isinstance(v, bool):
        return "true" if v else "false"
    if v is None:
        return "null"
    return v


def _search_params(req: Optional[Mapping[str, Any]]) -> str:
    """Serialize a payload as a query string, booleans and None spelled as in JSON."""
    return urlencode({k: _wire_value(v) for k, v in (req or {}).items()})


def _query(url: str, params: Dict[str, Any]) -> str:
    params = {k: v for k, v in params.items() if v}
    if not params:
        return url
    return url + "?" + urlencode(params)


class InteractiveSession:
    """
    Client for the Interactive REST API.
    Usage:
        xt = InteractiveSession(url="https://...")
        resp = xt.login({"userID": ..., "password": ..., "publicKey": ..., "source": ...})
        if isinstance(resp, InteractiveError):
            ...
        xt.place_order({...})
    Every operation returns either the decoded response or an InteractiveError.
    """
    def __init__(self, url: Optional[str] = None, client: Optional[APIClient] = None):
        self.state = SessionState(url=url if url is not None else config.DEFAULT_URL)
        self.client = client or APIClient()

    # -------------------- state accessors --------------------
    @property
    def url(self) -> str:
        return self.state.url

    @property
    def user_id(self) -> Optional[str]:
        return self.state.user_id

    @property
    def token(self) -> Optional[str]:
        return self.state.token

    @property
    def source(self) -> Optional[str]:
        return self.state.source

    @property
    def is_logged_in(self) -> bool:
        return self.state.is_logged_in

    @property
    def is_investor_client(self) -> bool:
        return self.state.is_investor_client

    @property
    def client_codes(self) -> List[str]:
        return self.state.client_codes

    @property
    def enums(self) -> Dict[str, Any]:
        return self.state.enums

    def capability(self, name: str) -> Dict[str, str]:
        return self.state.capabilities.get(name, {})

    @property
    def exchange_segments(self) -> Dict[str, str]:
        return self.capability("exchangeSegment")

    @property
    def order_types(self) -> Dict[str, str]:
        return self.capability("orderTypes")

    @property
    def product_types(self) -> Dict[str, str]:
        return self.capability("productTypes")

    @property
    def time_in_force(self) -> Dict[str, str]:
        return self.capability("timeInForce")

    # -------------------- internals --------------------
    def _path(self, key: str) -> str:
        return self.state.url + config.REST_API[key]

    def _auth(self) -> Dict[str, Any]:
        return {"authorization": self.state.token}

    def check_logged_in(self) -> Outcome:
        if self.state.is_logged_in:
            return OK
        return failed(*LOGIN_REQUIRED)

    def check_client_codes(self, req: Optional[Mapping[str, Any]] = None) -> Outcome:
        """Multi-account sessions must name the account (clientID) explicitly."""
        if self.state.is_investor_client:
            return OK
        if _client_id(req) is None:
            return failed(*CLIENT_CODE_REQUIRED)
        return OK

    def _gate(self, req: Any = None, client_codes: bool = False) -> Optional[InteractiveError]:
        outcome = self.check_logged_in()
        if outcome.ok and client_codes:
            outcome = self.check_client_codes(req)
        return outcome.error

    # -------------------- session --------------------
    @returns_error("Login operation failed.")
    def login(self, req: Mapping[str, Any]):
        """
        req: {"userID", "password", "publicKey", "source"}
        """
        resp = self.client.request("POST", self._path("session"), {}, req)
        result = resp["result"]
        self.state.mark_authenticated(req["userID"], result["token"], result, source=req.get("source"))
        logger.info("Logged in userID=%s investor=%s", self.state.user_id, self.state.is_investor_client)
        return resp

    @returns_error("Login with token operation failed.")
    def login_with_token(self, user_id: str, token: str):
        url = _query(self._path("enums"), {"userID": user_id})
        resp = self.client.request("GET", url, {"authorization": token}, None)
        self.state.mark_authenticated(user_id, token, resp["result"])
        logger.info("Logged in with token userID=%s", user_id)
        return resp

    @returns_error("Logout operation failed.")
    def logout(self):
        # is_logged_in stays True after a successful logout
        err = self._gate()
        if err:
            return err
        return self.client.request("DELETE", self._path("session"), self._auth(), None)

    # -------------------- account / portfolio --------------------
    def _account_read(self, key: str, req: Optional[Mapping[str, Any]]):
        err = self._gate()
        if err:
            return err
        url = _query(self._path(key), {"clientID": _client_id(req)})
        return self.client.request("GET", url, self._auth(), None)

    @returns_error("Get profile operation failed.")
    def get_profile(self, req: Optional[Mapping[str, Any]] = None):
        return self._account_read("profile", req)

    @returns_error("Get balance operation failed.")
    def get_balance(self, req: Optional[Mapping[str, Any]] = None):
        return self._account_read("balance", req)

    @returns_error("Get holdings operation failed.")
    def get_holdings(self, req: Optional[Mapping[str, Any]] = None):
        return self._account_read("holding", req)

    @returns_error("Get positions operation failed.")
    def get_positions(self, req: Optional[Mapping[str, Any]] = None):
        """
        req: {"dayOrNet": "DayWise" | "NetWise", "clientID": optional}
        """
        err = self._gate()
        if err:
            return err
        day_or_net = (req.get("dayOrNet") if isinstance(req, Mapping) else None) or config.DEFAULT_DAY_OR_NET
        url = _query(self._path("position"), {"dayOrNet": day_or_net, "clientID": _client_id(req)})
        return self.client.request("GET", url, self._auth(), None)

    @returns_error("Position conversion operation failed.")
    def position_conversion(self, req: Mapping[str, Any]):
        """
        req: {"appOrderID", "executionID", "oldProductType", "newProductType"}
        """
        err = self._gate()
        if err:
            return err
        return self.client.request("PUT", self._path("convert"), self._auth(), req)

    @returns_error("Square off operation failed.")
    def square_off(self, req: Mapping[str, Any]):
        err = self._gate()
        if err:
            return err
        return self.client.request("PUT", self._path("squareoff"), self._auth(), req)

    # -------------------- orders --------------------
    @returns_error("Place order operation failed.")
    def place_order(self, req: Mapping[str, Any]):
        """
        req example:
            {"exchangeSegment": "NSECM", "exchangeInstrumentID": 22,
             "productType": "MIS", "orderType": "LIMIT", "orderSide": "BUY",
             "timeInForce": "DAY", "disclosedQuantity": 0, "orderQuantity": 20,
             "limitPrice": 1500.0, "stopPrice": 1600.0,
             "orderUniqueIdentifier": "454845"}
        """
        err = self._gate()
        if err:
            return err
        return self.client.request("POST", self._path("orders"), self._auth(), req)

    @returns_error("Modify order operation failed.")
    def modify_order(self, req: Mapping[str, Any]):
        err = self._gate(req, client_codes=True)
        if err:
            return err
        return self.client.request("PUT", self._path("orders"), self._auth(), req)

    @returns_error("Cancel order operation failed.")
    def cancel_order(self, req: Mapping[str, Any]):
        """
        req: {"appOrderID", "orderUniqueIdentifier", "clientID"}; sent as query string
        """
        err = self._gate(req, client_codes=True)
        if err:
            return err
        url = self._path("orders") + "?" + _search_params(req)
        return self.client.request("DELETE", url, self._auth(), None)

    @returns_error("Place cover order operation failed.")
    def place_cover_order(self, req: Mapping[str, Any]):
        err = self._gate()
        if err:
            return err
        return self.client.request("POST", self._path("cover"), self._auth(), req)

    @returns_error("Exit cover order operation failed.")
    def exit_cover_order(self, req: Mapping[str, Any]):
        err = self._gate()
        if err:
            return err
        url = self._path("cover") + "?" + urlencode({"appOrderID": req["appOrderID"]})
        return self.client.request("PUT", url, self._auth(), None)

    @returns_error("Get order book operation failed.")
    def get_order_book(self, req: Optional[Mapping[str, Any]] = None):
        err = self._gate(req, client_codes=True)
        if err:
            return err
        url = _query(self._path("orders"), {"clientID": _client_id(req)})
        return self.client.request("GET", url, self._auth(), None)

    @returns_error("Get trade book operation failed.")
    def get_trade_book(self, req: Optional[Mapping[str, Any]] = None):
        err = self._gate(req, client_codes=True)
        if err:
            return err
        url = _query(self._path("trade"), {"clientID": _client_id(req)})
        return self.client.request("GET", url, self._auth(), None)

    @returns_error("Get order history operation failed.")
    def get_order_history(self, app_order_id):
        err = self._gate()
        if err:
            return err
        path = config.REST_API["orderHistory"]
        if not path.endswith("/"):
            path += "/"
        return self.client.request("GET", self.state.url + path + str(app_order_id), self._auth(), None)
