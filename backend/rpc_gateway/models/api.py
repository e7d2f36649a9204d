"""API request and response models"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from rpc_gateway.services.health import CycleReport
from rpc_gateway.services.registry import require_http_urls


# Request Models


class EndpointUpdateRequest(BaseModel):
    """Replacement for the configured endpoint universe"""

    urls: List[str] = Field(..., min_length=1, description="RPC endpoint URLs, in routing order")

    @field_validator("urls")
    @classmethod
    def _http_urls_only(cls, urls: List[str]) -> List[str]:
        return require_http_urls(urls)


# Response Models


class EndpointListResponse(BaseModel):
    """Current registry contents"""

    universe: List[str] = Field(default_factory=list, description="All configured endpoints")
    healthy: List[str] = Field(default_factory=list, description="Last published healthy subset")


class ProbeResultResponse(BaseModel):
    """Outcome of one liveness probe"""

    endpoint: str
    healthy: bool
    latency: float = Field(..., description="Probe latency in seconds")
    status_code: Optional[int] = None
    error: Optional[str] = None


class CycleReportResponse(BaseModel):
    """Outcome of one health monitor cycle"""

    state: str
    universe: List[str]
    healthy: List[str]
    results: List[ProbeResultResponse]
    started_at: float = Field(..., description="Unix timestamp of cycle start")
    duration: float = Field(..., description="Cycle duration in seconds")
    error: Optional[str] = None

    @classmethod
    def from_report(cls, report: CycleReport) -> "CycleReportResponse":
        return cls.model_validate(report.to_dict())
