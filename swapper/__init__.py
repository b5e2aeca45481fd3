"""Swapper - single-pool constant-product token exchange."""

from swapper.custody import TokenBank, TokenCustody, TransferFailed
from swapper.events import EventLog, EventSink, PendingEvents
from swapper.exchange import Swapper
from swapper.oracle import TwapResult

__version__ = "0.1.0"
__all__ = [
    "Swapper",
    "TokenBank",
    "TokenCustody",
    "TransferFailed",
    "EventLog",
    "EventSink",
    "PendingEvents",
    "TwapResult",
    "__version__",
]
