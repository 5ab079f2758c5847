# xts_interactive/config.py
import os

DEFAULT_URL = os.getenv("XTS_INTERACTIVE_URL", "https://developers.symphonyfintech.in")
LOG_DIR = os.getenv("XTS_INTERACTIVE_LOG_DIR", os.path.join(os.getcwd(), "logs"))

# REST path templates, appended to the base url
REST_API = {
    "session": "/interactive/user/session",
    "profile": "/interactive/user/profile",
    "balance": "/interactive/user/balance",
    "enums": "/interactive/user/enums",
    "holding": "/interactive/portfolio/holdings",
    "position": "/interactive/portfolio/positions",
    "convert": "/interactive/portfolio/positions/convert",
    "squareoff": "/interactive/portfolio/squareoff",
    "orders": "/interactive/orders",
    "cover": "/interactive/orders/cover",
    "trade": "/interactive/orders/trades",
    "orderHistory": "/interactive/orders",
}

SOCKET_PATH = "/interactive/socket.io"
SOCKET_EVENTS = {
    "joined": "joined",
    "order": "order",
    "trade": "trade",
    "position": "position",
    "logout": "logout",
}

DEFAULT_DAY_OR_NET = "DayWise"
RECONNECT_INTERVAL = 5.0  # seconds
