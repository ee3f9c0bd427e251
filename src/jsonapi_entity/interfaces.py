"""
This module contains the interface definitions that need to be implemented
by the backend that fetches, caches and keeps track of hydrated entities.

"""
import abc
import typing

from .models import LookupKey
from .types import JSONObject

if typing.TYPE_CHECKING:  # pragma: nocover
    from .entity import SingleEntity


class EntityRepository(metaclass=abc.ABCMeta):
    """
    An :py:class:`EntityRepository` is the collaborator every entity hydrates
    its relationships through. It owns the network access, the cache, the
    depth cutoff and the set of lookups already visited in a traversal.
    """

    @abc.abstractmethod
    async def get_entity(self, lookup: LookupKey, depth: int) -> "SingleEntity":
        """
        Fetches (or builds from the cache) the entity identified by the lookup.

        :param LookupKey lookup: the resource to hydrate.
        :param int depth: the recursion depth the entity is hydrated at.
        :return: The hydrated entity.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def get_relationship(self, reference: JSONObject) -> typing.Optional["SingleEntity"]:
        """
        Returns the already hydrated entity a reference points to, or None if
        it is not known yet.

        :param JSONObject reference: a ``{"type": ..., "id": ...}`` reference.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def has_been_traversed(self, lookup: LookupKey) -> bool:
        ...  # pragma: nocover

    @abc.abstractmethod
    def claim(self, lookup: LookupKey) -> bool:
        """
        Marks the lookup as visited before it gets fetched.

        :return: False if the lookup had already been claimed, in which case the
                 caller must not issue a fetch for it.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def release(self, lookup: LookupKey) -> None:
        """
        Gives back a claim whose hydration never started, so that a later
        traversal can fetch the lookup. Claims backed by a hydration are kept.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def endpoint(self, lookup: LookupKey) -> str:
        """
        Returns the canonical string form of the lookup.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def cache_to_object(self) -> typing.Dict[str, JSONObject]:
        ...  # pragma: nocover

    @abc.abstractmethod
    def cache_from_object(self, cache: typing.Mapping[str, JSONObject]) -> None:
        ...  # pragma: nocover


class CacheStore(metaclass=abc.ABCMeta):
    """
    A :py:class:`CacheStore` keeps cleaned resource documents keyed by endpoint.
    """

    @abc.abstractmethod
    def get(self, endpoint: str) -> typing.Optional[JSONObject]:
        ...  # pragma: nocover

    @abc.abstractmethod
    def set(self, endpoint: str, resource: JSONObject) -> None:
        ...  # pragma: nocover

    @abc.abstractmethod
    def items(self) -> typing.Iterable[typing.Tuple[str, JSONObject]]:
        ...  # pragma: nocover

    @abc.abstractmethod
    def clear(self) -> None:
        ...  # pragma: nocover
