# xts_interactive/portfolio.py
import logging
from typing import Any, Dict, Optional

import pandas as pd

from .errors import InteractiveError
from .session import InteractiveSession

logger = logging.getLogger("xts_interactive.portfolio")
logger.setLevel(logging.INFO)

POSITION_COLS = ["ExchangeSegment", "ExchangeInstrumentId", "TradingSymbol", "ProductType",
                 "Quantity", "BuyAveragePrice", "SellAveragePrice", "NetAmount", "MTM", "RealizedMTM",
                 "UnrealizedMTM", "AccountID"]
ORDER_COLS = ["AppOrderID", "ExchangeSegment", "ExchangeInstrumentID", "TradingSymbol", "OrderSide",
              "OrderType", "ProductType", "TimeInForce", "OrderQuantity", "OrderPrice",
              "CumulativeQuantity", "OrderStatus", "OrderUniqueIdentifier", "ClientID"]
TRADE_COLS = ["AppOrderID", "ExecutionID", "ExchangeSegment", "ExchangeInstrumentID", "TradingSymbol",
              "OrderSide", "ProductType", "LastTradedQuantity", "LastTradedPrice",
              "ExchangeTransactTime", "ClientID"]


def _result(resp: Any):
    if isinstance(resp, InteractiveError) or not isinstance(resp, dict):
        return None
    return resp.get("result")


def _frame(rows, preferred_cols) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame()
    df = pd.DataFrame(rows)
    cols = [c for c in preferred_cols if c in df.columns]
    rest = [c for c in df.columns if c not in cols]
    return df[cols + rest].reset_index(drop=True)


def positions_frame(resp: Any) -> pd.DataFrame:
    result = _result(resp)
    rows = result.get("positionList") if isinstance(result, dict) else result
    df = _frame(rows, POSITION_COLS)
    for c in ("Quantity", "BuyAveragePrice", "SellAveragePrice", "NetAmount", "MTM", "RealizedMTM", "UnrealizedMTM"):
        if c in df.columns:
            df[c] = pd.to_numeric(df[c], errors="coerce")
    return df


def holdings_frame(resp: Any) -> pd.DataFrame:
    """
    Holdings come keyed by ISIN under result.RMSHoldings.Holdings; the key is
    kept as an ISIN column.
    """
    result = _result(resp)
    if not isinstance(result, dict):
        return pd.DataFrame()
    holdings = (result.get("RMSHoldings") or {}).get("Holdings") or result.get("Holdings") or {}
    if isinstance(holdings, dict):
        rows = [dict(v, ISIN=k) if isinstance(v, dict) else {"ISIN": k, "value": v} for k, v in holdings.items()]
    else:
        rows = list(holdings)
    df = _frame(rows, ["ISIN"])
    for c in ("HoldingQuantity", "BuyAvgPrice", "UsedHoldingQuantity", "UnusedHoldingQuantity"):
        if c in df.columns:
            df[c] = pd.to_numeric(df[c], errors="coerce")
    return df


def orders_frame(resp: Any) -> pd.DataFrame:
    result = _result(resp)
    return _frame(result if isinstance(result, list) else None, ORDER_COLS)


def trades_frame(resp: Any) -> pd.DataFrame:
    result = _result(resp)
    return _frame(result if isinstance(result, list) else None, TRADE_COLS)


class PortfolioManager:
    """Fetches account data through a logged-in session and returns DataFrames."""
    def __init__(self, session: InteractiveSession):
        self.session = session

    def _fetch(self, what: str, resp: Any, to_frame) -> pd.DataFrame:
        if isinstance(resp, InteractiveError):
            logger.error("Failed to fetch %s: %s (status %s)", what, resp.message, resp.status_code)
            return pd.DataFrame()
        return to_frame(resp)

    @staticmethod
    def _req(client_id: Optional[str], **extra) -> Dict[str, Any]:
        req = {k: v for k, v in extra.items() if v is not None}
        if client_id is not None:
            req["clientID"] = client_id
        return req

    def fetch_positions_table(self, day_or_net: Optional[str] = None, client_id: Optional[str] = None) -> pd.DataFrame:
        resp = self.session.get_positions(self._req(client_id, dayOrNet=day_or_net))
        return self._fetch("positions", resp, positions_frame)

    def fetch_holdings_table(self, client_id: Optional[str] = None) -> pd.DataFrame:
        resp = self.session.get_holdings(self._req(client_id))
        return self._fetch("holdings", resp, holdings_frame)

    def fetch_order_book(self, client_id: Optional[str] = None) -> pd.DataFrame:
        resp = self.session.get_order_book(self._req(client_id))
        return self._fetch("order book", resp, orders_frame)

    def fetch_trade_book(self, client_id: Optional[str] = None) -> pd.DataFrame:
        resp = self.session.get_trade_book(self._req(client_id))
        return self._fetch("trade book", resp, trades_frame)

    def summary(self, client_id: Optional[str] = None) -> Dict[str, float]:
        """Net-wise MTM totals."""
        p = self.fetch_positions_table(day_or_net="NetWise", client_id=client_id)
        def total(col):
            return float(p[col].sum()) if col in p.columns else 0.0
        return {"mtm": total("MTM"), "realized_mtm": total("RealizedMTM"),
                "unrealized_mtm": total("UnrealizedMTM"), "open_positions": int((p["Quantity"] != 0).sum()) if "Quantity" in p.columns else 0}
