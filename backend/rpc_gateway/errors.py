"""Error taxonomy shared by the registry, health monitor and router"""

from typing import Optional


class GatewayError(Exception):
    """Base class for gateway errors"""


class StoreUnavailable(GatewayError):
    """The endpoint registry could not complete a read or write"""


class RegistryDataError(StoreUnavailable):
    """A registry key holds something other than a JSON array of strings"""


class NoHealthyEndpoints(GatewayError):
    """The healthy set was empty at read time"""

    def __init__(self, message: str = "No healthy RPC endpoints available") -> None:
        super().__init__(message)


class UpstreamUnreachable(GatewayError):
    """The selected endpoint did not answer at the transport level"""

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"{endpoint} unreachable: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class ProbeFailed(GatewayError):
    """A liveness probe classified an endpoint as unhealthy"""

    def __init__(self, endpoint: str, reason: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"{endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason
        self.status_code = status_code
