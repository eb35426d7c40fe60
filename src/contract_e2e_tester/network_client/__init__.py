"""Network client exports."""

from .chain_client import (
    ChainClient,
    ChainQueryRejected,
    ChainRequestError,
    ClientConnectionError,
    ClientFactory,
    Funds,
)
from .client_models import ClientContext, LogEntry, TxEvent, TxLog, TxReceipt

__all__ = [
    "ChainClient",
    "ChainQueryRejected",
    "ChainRequestError",
    "ClientConnectionError",
    "ClientFactory",
    "Funds",
    "ClientContext",
    "LogEntry",
    "TxEvent",
    "TxLog",
    "TxReceipt",
]
