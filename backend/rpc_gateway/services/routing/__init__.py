"""Request routing: healthy-endpoint selection and upstream forwarding."""

from .forwarder import ProxyRequest, ProxyResponse, UpstreamForwarder
from .router import RequestRouter
from .selector import RandomEndpointSelector

__all__ = [
    "ProxyRequest",
    "ProxyResponse",
    "RandomEndpointSelector",
    "RequestRouter",
    "UpstreamForwarder",
]
