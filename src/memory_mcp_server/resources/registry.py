"""
Resource registry for the MCP server.

Maps resource URIs to descriptors and the coroutines producing their
contents. Resources live under the ``memory://`` scheme, where the part
after the scheme is a key in the memory store.
"""

from typing import Awaitable, Callable, Dict, List, Optional

import structlog

from ..protocol.schemas import MCPInvalidRequestError, Resource, ResourceContents
from ..store import MemoryStore
from ..tools.memory import dump_json

logger = structlog.get_logger(__name__)

MEMORY_SCHEME = "memory://"
JSON_MIME_TYPE = "application/json"

Producer = Callable[[], Awaitable[ResourceContents]]

_NOT_FOUND = object()


class DuplicateResourceError(ValueError):
    """Raised when a resource URI is registered twice."""

    def __init__(self, uri: str):
        super().__init__(f"Resource already registered: {uri}")
        self.uri = uri


def memory_key(uri: str) -> str:
    """
    Derive the store key from a memory URI.

    Raises:
        MCPInvalidRequestError: If the URI uses another scheme
    """
    if not uri.startswith(MEMORY_SCHEME):
        raise MCPInvalidRequestError(f"Unsupported URI scheme: {uri}")
    return uri[len(MEMORY_SCHEME):]


class ResourceRegistry:
    """
    Registry of readable resources backed by a memory store.

    Registered resources are listed in registration order and read through
    their producer. Other ``memory://`` URIs are read straight from the
    store, so values written by tools can be read back as resources.
    """

    def __init__(self, store: MemoryStore):
        self.store = store
        self._resources: Dict[str, Resource] = {}
        self._producers: Dict[str, Producer] = {}

    def register(self, resource: Resource, producer: Optional[Producer] = None) -> None:
        """
        Register a resource.

        Args:
            resource: Resource descriptor
            producer: Coroutine function producing the contents. Defaults to
                reading the store entry named by the URI.

        Raises:
            MCPInvalidRequestError: If the URI is not a ``memory://`` URI
            DuplicateResourceError: If the URI is already registered
        """
        memory_key(resource.uri)
        if resource.uri in self._resources:
            raise DuplicateResourceError(resource.uri)

        self._resources[resource.uri] = resource
        self._producers[resource.uri] = producer or self._store_producer(resource)
        logger.info("Registered resource", uri=resource.uri)

    def register_memory_resource(
        self,
        key: str,
        name: str,
        description: Optional[str] = None,
    ) -> Resource:
        """Register a JSON resource for a store key."""
        resource = Resource(
            uri=f"{MEMORY_SCHEME}{key}",
            name=name,
            description=description,
            mimeType=JSON_MIME_TYPE,
        )
        self.register(resource)
        return resource

    def list(self) -> List[Resource]:
        """Return resource definitions for discovery."""
        return list(self._resources.values())

    def get(self, uri: str) -> Optional[Resource]:
        return self._resources.get(uri)

    async def read(self, uri: str) -> ResourceContents:
        """
        Read the contents of a resource.

        Raises:
            MCPInvalidRequestError: If the scheme is unsupported or nothing
                is stored for the URI
        """
        key = memory_key(uri)

        producer = self._producers.get(uri)
        if producer is not None:
            return await producer()

        return await self._read_store(uri, key)

    def _store_producer(self, resource: Resource) -> Producer:
        key = memory_key(resource.uri)

        async def produce() -> ResourceContents:
            return await self._read_store(resource.uri, key, resource.mimeType)

        return produce

    async def _read_store(
        self, uri: str, key: str, mime_type: str = JSON_MIME_TYPE
    ) -> ResourceContents:
        value = await self.store.get(key, _NOT_FOUND)
        if value is _NOT_FOUND:
            raise MCPInvalidRequestError(f"Resource not found: {uri}")
        return ResourceContents.text(uri, dump_json(value), mime_type)

    def __contains__(self, uri: object) -> bool:
        return uri in self._resources

    def __len__(self) -> int:
        return len(self._resources)
