"""
Unit tests for the resource registry and memory store.
"""

import asyncio
import json

import pytest

from memory_mcp_server.protocol.schemas import (
    MCPInvalidRequestError,
    Resource,
    ResourceContents,
)
from memory_mcp_server.resources.registry import DuplicateResourceError, memory_key
from memory_mcp_server.store import MemoryStore


class TestResourceRegistry:
    """Test resource registry."""

    @pytest.fixture
    def registry(self, resource_registry):
        resource_registry.register_memory_resource(
            "config", "Configuration Settings", "Application configuration data"
        )
        return resource_registry

    def test_list(self, registry):
        resources = registry.list()

        assert [resource.uri for resource in resources] == ["memory://config"]
        assert resources[0].mimeType == "application/json"

    def test_duplicate_uri(self, registry):
        with pytest.raises(DuplicateResourceError):
            registry.register_memory_resource("config", "Again")

    @pytest.mark.asyncio
    async def test_read_registered(self, registry):
        contents = await registry.read("memory://config")

        assert len(contents.contents) == 1
        item = contents.contents[0]
        assert item.uri == "memory://config"
        assert item.mimeType == "application/json"
        assert json.loads(item.text) == {"theme": "dark", "language": "en"}

    @pytest.mark.asyncio
    async def test_read_unregistered_store_key(self, registry):
        contents = await registry.read("memory://data")

        assert json.loads(contents.contents[0].text)["users"] == ["alice", "bob"]

    @pytest.mark.asyncio
    async def test_read_reflects_store_changes(self, registry, store):
        await store.set("config", {"theme": "light"})

        contents = await registry.read("memory://config")

        assert json.loads(contents.contents[0].text) == {"theme": "light"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("uri", ["http://x", "file:///etc/passwd", "config", "MEMORY://config"])
    async def test_unsupported_scheme(self, registry, uri):
        with pytest.raises(MCPInvalidRequestError) as exc_info:
            await registry.read(uri)

        assert exc_info.value.message == f"Unsupported URI scheme: {uri}"

    @pytest.mark.asyncio
    async def test_not_found(self, registry, store):
        await store.delete("config")

        with pytest.raises(MCPInvalidRequestError) as exc_info:
            await registry.read("memory://config")

        assert exc_info.value.message == "Resource not found: memory://config"

    @pytest.mark.asyncio
    async def test_custom_producer(self, registry):
        async def produce():
            return ResourceContents.text("memory://greeting", "hello", "text/plain")

        registry.register(
            Resource(uri="memory://greeting", name="Greeting", mimeType="text/plain"), produce
        )

        contents = await registry.read("memory://greeting")

        assert contents.contents[0].text == "hello"
        assert contents.contents[0].mimeType == "text/plain"

    @pytest.mark.parametrize("uri", ["file:///x", "http://example.com/data", "config"])
    def test_register_rejects_other_schemes(self, registry, uri):
        async def produce():
            return ResourceContents.text(uri, "{}")

        with pytest.raises(MCPInvalidRequestError) as exc_info:
            registry.register(Resource(uri=uri, name="Elsewhere"), produce)

        assert exc_info.value.message == f"Unsupported URI scheme: {uri}"
        assert uri not in registry
        assert [resource.uri for resource in registry.list()] == ["memory://config"]

    @pytest.mark.asyncio
    async def test_every_listed_resource_is_readable(self, registry):
        async def produce():
            return ResourceContents.text("memory://greeting", '"hi"')

        registry.register(Resource(uri="memory://greeting", name="Greeting"), produce)

        for resource in registry.list():
            contents = await registry.read(resource.uri)
            assert contents.contents[0].uri == resource.uri

    def test_memory_key(self):
        assert memory_key("memory://config") == "config"
        assert memory_key("memory://a/b") == "a/b"


class TestMemoryStore:
    """Test in-memory store."""

    @pytest.mark.asyncio
    async def test_get_set_has_delete_clear(self):
        store = MemoryStore()

        assert await store.get("k") is None
        assert not await store.has("k")

        await store.set("k", {"v": 1})
        assert await store.get("k") == {"v": 1}
        assert await store.has("k")

        assert await store.delete("k")
        assert not await store.delete("k")

        await store.set("a", 1)
        await store.set("b", 2)
        assert sorted(await store.keys()) == ["a", "b"]
        await store.clear()
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_seed_is_copied(self):
        seed = {"config": {"theme": "dark"}}
        store = MemoryStore(seed)

        seed["config"]["theme"] = "light"

        assert await store.get("config") == {"theme": "dark"}

    @pytest.mark.asyncio
    async def test_separate_stores_are_independent(self):
        first = MemoryStore()
        second = MemoryStore()

        await first.set("k", 1)

        assert not await second.has("k")

    @pytest.mark.asyncio
    async def test_concurrent_writers(self):
        store = MemoryStore()

        await asyncio.gather(*(store.set(f"k{i}", i) for i in range(50)))

        assert len(store) == 50
        assert await store.get("k49") == 49
