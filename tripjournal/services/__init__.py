"""เซอร์วิสของไคลเอนต์: endpoint, request/response pipeline, session, connectivity และ JournalClient."""
from tripjournal.services.endpoints import EndpointResolver, Operation
from tripjournal.services.session import JournalSession
from tripjournal.services.request_builder import BodyEncoding, RequestBuilder
from tripjournal.services.response_decoder import EMPTY_RESULT, decode_response
from tripjournal.services.connectivity import (
    ConnectivityMonitor,
    ConnectivityStatus,
    PathObservation,
    ProbeConnectivityMonitor,
    StaticConnectivityMonitor,
    tcp_probe,
)
from tripjournal.services.journal_client import JournalClient

__all__ = [
    "EndpointResolver",
    "Operation",
    "JournalSession",
    "BodyEncoding",
    "RequestBuilder",
    "EMPTY_RESULT",
    "decode_response",
    "ConnectivityMonitor",
    "ConnectivityStatus",
    "PathObservation",
    "ProbeConnectivityMonitor",
    "StaticConnectivityMonitor",
    "tcp_probe",
    "JournalClient",
]
