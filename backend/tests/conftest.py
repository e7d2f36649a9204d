import pytest

from rpc_gateway.services.gateway import set_gateway
from rpc_gateway.services.registry import InMemoryEndpointRegistry, set_registry


@pytest.fixture
def registry() -> InMemoryEndpointRegistry:
    return InMemoryEndpointRegistry()


@pytest.fixture(autouse=True)
def _reset_globals():
    yield
    set_gateway(None)
    set_registry(None)
