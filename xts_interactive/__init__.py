# xts_interactive/__init__.py

from .api_client import APIClient
from .errors import InteractiveError, TransportError, Outcome
from .enums import build_capability_tables
from .session import InteractiveSession, SessionState
from .socket_client import InteractiveSocket
from .portfolio import PortfolioManager
from .logger import setup_logging

__version__ = "0.1.0"
