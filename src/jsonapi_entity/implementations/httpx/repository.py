import typing

import httpx
from loguru import logger

from ...cache import MemoryCacheStore
from ...config import DEFAULT_CONFIG, EntityConfig
from ...entity import EntityCollection, SingleEntity
from ...exceptions import EntityFetchError
from ...interfaces import CacheStore, EntityRepository
from ...models import LookupKey
from ...traversal import TraversalContext
from ...types import JSONObject


class HTTPXEntityRepository(EntityRepository):
    """
    An :py:class:`EntityRepository` that fetches resources from a Drupal
    JSON:API endpoint with an ``httpx.AsyncClient``.

    Relationships are hydrated recursively until ``max_depth`` is reached;
    entities built at ``max_depth`` keep their relationships unresolved.

    :param httpx.AsyncClient client: a client whose ``base_url`` points to the site.
    :param int max_depth: the depth at which recursion stops.
    :param Optional[CacheStore] cache: where cleaned resources are kept.
    :param Optional[EntityConfig] config: the configuration for built entities.
    :param str prefix: the path prefix of the JSON:API routes.
    """

    client: httpx.AsyncClient
    max_depth: int
    cache: CacheStore
    config: EntityConfig
    prefix: str
    traversal: TraversalContext

    def endpoint(self, lookup: LookupKey) -> str:
        return f"{self.prefix}/{lookup.entity}/{lookup.bundle}/{lookup.uuid}"

    def has_been_traversed(self, lookup: LookupKey) -> bool:
        return self.traversal.is_claimed(self.endpoint(lookup))

    def claim(self, lookup: LookupKey) -> bool:
        return self.traversal.claim(self.endpoint(lookup))

    def release(self, lookup: LookupKey) -> None:
        self.traversal.release(self.endpoint(lookup))

    def get_relationship(self, reference: JSONObject) -> typing.Optional[SingleEntity]:
        if not self.config.is_relationship(reference):
            return None
        return self.traversal.result(self.endpoint(LookupKey.from_reference(reference)))

    async def get_entity(self, lookup: LookupKey, depth: int = 0) -> SingleEntity:
        endpoint = self.endpoint(lookup)
        return await self.traversal.run_once(endpoint, lambda: self._hydrate(endpoint, depth))

    async def _hydrate(self, endpoint: str, depth: int) -> SingleEntity:
        resource = self.cache.get(endpoint)
        if resource is None:
            resource = await self.fetch(endpoint)
        else:
            logger.debug(f"cache hit for {endpoint}")
        entity = SingleEntity(resource, self, self.config, depth)
        self.cache.set(endpoint, entity.to_object())
        if depth < self.max_depth:
            await entity.load_relationships(depth)
        return entity

    async def get_collection(self, entity: str, bundle: str, depth: int = 0) -> EntityCollection:
        payload = await self.fetch(f"{self.prefix}/{entity}/{bundle}")
        return EntityCollection(payload, self, self.config, depth)

    async def fetch(self, endpoint: str) -> JSONObject:
        logger.debug(f"GET {endpoint}")
        try:
            response = await self.client.get(endpoint)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EntityFetchError(endpoint, e.response.status_code) from e
        except httpx.HTTPError as e:
            raise EntityFetchError(endpoint) from e
        logger.info(f"fetched {endpoint} ({response.status_code})")
        return response.json()

    def cache_to_object(self) -> typing.Dict[str, JSONObject]:
        return dict(self.cache.items())

    def cache_from_object(self, cache: typing.Mapping[str, JSONObject]) -> None:
        for endpoint, resource in cache.items():
            self.cache.set(endpoint, resource)

    def reset(self) -> None:
        """
        Forgets what has been traversed so far; cached resources are kept.
        """
        self.traversal.clear()

    def __init__(
        self,
        client: httpx.AsyncClient,
        max_depth: int = 2,
        cache: typing.Optional[CacheStore] = None,
        config: typing.Optional[EntityConfig] = None,
        prefix: str = "/jsonapi",
    ):
        self.client = client
        self.max_depth = max_depth
        self.cache = cache if cache is not None else MemoryCacheStore()
        self.config = config or DEFAULT_CONFIG
        self.prefix = prefix.rstrip("/")
        self.traversal = TraversalContext()
