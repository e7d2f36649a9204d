"""Tests for the endpoint registry backends and their JSON representation"""

import json

import pytest

from rpc_gateway.errors import RegistryDataError, StoreUnavailable
from rpc_gateway.services.registry import (
    InMemoryEndpointRegistry,
    RedisEndpointRegistry,
    decode_endpoints,
    encode_endpoints,
    normalize_endpoints,
    seed_universe,
)

from tests.doubles import FakeRedisClient


class TestCodec:
    """Test the JSON array representation of endpoint lists"""

    def test_round_trip_preserves_order(self):
        """Test that encoding then decoding yields the identical ordered list"""
        endpoints = ["https://c.example", "https://a.example", "https://b.example"]

        assert decode_endpoints(encode_endpoints(endpoints)) == endpoints

    def test_encoded_form_is_plain_json_array(self):
        raw = encode_endpoints(["https://a.example", "https://b.example"])

        assert json.loads(raw) == ["https://a.example", "https://b.example"]

    def test_missing_value_decodes_to_empty(self):
        assert decode_endpoints(None) == []

    def test_bytes_are_accepted(self):
        assert decode_endpoints(b'["https://a.example"]') == ["https://a.example"]

    @pytest.mark.parametrize("raw", ["not json", '{"a": 1}', '["ok", 3]', '"https://a.example"'])
    def test_malformed_values_raise(self, raw):
        """Test that anything but an array of strings is rejected"""
        with pytest.raises(RegistryDataError):
            decode_endpoints(raw, key="healthy_rpcs")

    def test_registry_data_error_is_store_unavailable(self):
        assert issubclass(RegistryDataError, StoreUnavailable)

    def test_normalize_strips_slashes_and_duplicates(self):
        urls = ["https://a.example/", " https://b.example ", "https://a.example", ""]

        assert normalize_endpoints(urls) == ["https://a.example", "https://b.example"]


class TestInMemoryRegistry:
    """Test the process-local registry"""

    @pytest.mark.asyncio
    async def test_healthy_defaults_to_empty(self, registry):
        assert await registry.get_healthy() == []
        assert await registry.get_universe() == []

    @pytest.mark.asyncio
    async def test_read_after_write(self, registry):
        """Test that put_healthy then get_healthy returns exactly the published list"""
        published = ["https://a.example", "https://c.example"]

        await registry.put_healthy(published)

        assert await registry.get_healthy() == published

    @pytest.mark.asyncio
    async def test_whole_list_replace(self, registry):
        """Test that a publish fully replaces the previous list"""
        await registry.put_healthy(["https://a.example", "https://b.example"])
        await registry.put_healthy(["https://c.example"])

        assert await registry.get_healthy() == ["https://c.example"]

    @pytest.mark.asyncio
    async def test_caller_mutation_does_not_leak(self, registry):
        published = ["https://a.example"]
        await registry.put_healthy(published)
        published.append("https://b.example")

        snapshot = await registry.get_healthy()
        snapshot.append("https://z.example")

        assert await registry.get_healthy() == ["https://a.example"]

    @pytest.mark.asyncio
    async def test_uses_configured_keys(self):
        registry = InMemoryEndpointRegistry(universe=["https://a.example"])

        assert registry.raw("all_rpcs") == '["https://a.example"]'
        assert registry.raw("healthy_rpcs") is None


class TestRedisRegistry:
    """Test the Redis registry against a client double"""

    @pytest.mark.asyncio
    async def test_reads_and_writes_json_arrays(self):
        client = FakeRedisClient()
        client.values["all_rpcs"] = '["https://a.example","https://b.example"]'
        registry = RedisEndpointRegistry(client=client)

        assert await registry.get_universe() == ["https://a.example", "https://b.example"]

        await registry.put_healthy(["https://b.example"])

        assert client.values["healthy_rpcs"] == '["https://b.example"]'
        assert await registry.get_healthy() == ["https://b.example"]

    @pytest.mark.asyncio
    async def test_missing_healthy_key_is_empty(self):
        registry = RedisEndpointRegistry(client=FakeRedisClient())

        assert await registry.get_healthy() == []

    @pytest.mark.asyncio
    async def test_connection_errors_become_store_unavailable(self):
        registry = RedisEndpointRegistry(client=FakeRedisClient(down=True))

        with pytest.raises(StoreUnavailable):
            await registry.get_universe()
        with pytest.raises(StoreUnavailable):
            await registry.get_healthy()
        with pytest.raises(StoreUnavailable):
            await registry.put_healthy(["https://a.example"])

    @pytest.mark.asyncio
    async def test_custom_keys(self):
        client = FakeRedisClient()
        registry = RedisEndpointRegistry(client=client, universe_key="u", healthy_key="h")

        await registry.put_universe(["https://a.example"])
        await registry.put_healthy([])

        assert client.values == {"u": '["https://a.example"]', "h": "[]"}

    @pytest.mark.asyncio
    async def test_close_releases_client(self):
        client = FakeRedisClient()
        registry = RedisEndpointRegistry(client=client)

        await registry.close()

        assert client.closed


class TestSeedUniverse:
    """Test out-of-band seeding of the universe from configuration"""

    @pytest.mark.asyncio
    async def test_seeds_empty_registry(self, registry):
        written = await seed_universe(registry, ["https://a.example/", "https://b.example"])

        assert written
        assert await registry.get_universe() == ["https://a.example", "https://b.example"]

    @pytest.mark.asyncio
    async def test_existing_universe_is_kept(self):
        registry = InMemoryEndpointRegistry(universe=["https://old.example"])

        written = await seed_universe(registry, ["https://new.example"])

        assert not written
        assert await registry.get_universe() == ["https://old.example"]

    @pytest.mark.asyncio
    async def test_nothing_configured(self, registry):
        assert not await seed_universe(registry, [])
        assert registry.raw("all_rpcs") is None
