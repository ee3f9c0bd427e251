"""
Entities wrap one cleaned JSON:API document.

* :py:class:`SingleEntity` wraps a single resource and offers field access,
  value resolution and recursive relationship loading.
* :py:class:`EntityCollection` wraps a list of resources and offers access to
  its members.

Use :py:func:`build_entity` to get the right one for a payload.
"""
import abc
import asyncio
import collections.abc
import functools
import inspect
import json
import operator
import types
import typing

from loguru import logger

from .config import DEFAULT_CONFIG, EntityConfig
from .deferred import Deferred
from .exceptions import FieldNotFoundError, InvalidDocumentError, SerializationError
from .extractor import collect_lookups
from .interfaces import EntityRepository
from .matchers import INTERNAL_ID_TEST, matches_any
from .models import LookupKey, Reference, WrappedReference, classify_reference, split_type
from .types import FieldPath, JSONObject, JSONValue

SERIALIZED_KEY = "__NUXT_SERIALIZED__"


def as_document(payload: JSONObject) -> JSONObject:
    """
    Wraps a bare resource object into a ``{"data": ...}`` document.
    """
    if not isinstance(payload, collections.abc.Mapping):
        raise InvalidDocumentError(f"expected an object, got {type(payload).__name__}")
    if "data" not in payload and payload.get("type") and payload.get("id"):
        return {"data": payload}
    return payload


class Entity(metaclass=abc.ABCMeta):
    repository: EntityRepository
    config: EntityConfig
    res: typing.Dict[str, typing.Any]
    depth: int

    @property
    @abc.abstractmethod
    def is_collection(self) -> bool:
        ...  # pragma: nocover

    def to_object(self) -> JSONObject:
        """
        Returns the cleaned document, from which the entity can be built again.
        """
        return self.res

    def to_json(self) -> str:
        """
        Serializes the cleaned document together with a snapshot of the repository's
        cache, so that the already hydrated relationship graph can be restored as well.
        """
        return json.dumps(
            {
                SERIALIZED_KEY: {
                    "res": self.res,
                    "cache": self.repository.cache_to_object(),
                },
            }
        )

    @classmethod
    def from_json(
        cls,
        text: str,
        repository: EntityRepository,
        config: typing.Optional[EntityConfig] = None,
        depth: int = 0,
    ) -> "Entity":
        try:
            envelope = json.loads(text)[SERIALIZED_KEY]
            res = envelope["res"]
            cache = envelope.get("cache") or {}
        except (ValueError, KeyError, TypeError) as e:
            raise SerializationError(f"malformed envelope ({e!s})") from e
        repository.cache_from_object(cache)
        return build_entity(res, repository, config, depth)

    def __init__(
        self,
        res: typing.Dict[str, typing.Any],
        repository: EntityRepository,
        config: EntityConfig,
        depth: int,
    ):
        self.res = res
        self.repository = repository
        self.config = config
        self.depth = depth


class SingleEntity(Entity):
    data: typing.Dict[str, typing.Any]
    attrs: typing.Mapping[str, JSONValue]
    _entity: str
    _bundle: str
    _field_map: Deferred[typing.Mapping[str, FieldPath]]
    _id: Deferred[typing.Any]

    @property
    def is_collection(self) -> bool:
        return False

    @property
    def id(self) -> typing.Any:
        """
        The Drupal internal identifier (``drupal_internal__nid`` and the like), or None.
        """
        return self._id()

    @property
    def uuid(self) -> typing.Optional[str]:
        return self.data.get("id")

    @property
    def entity(self) -> str:
        return self._entity

    @property
    def type(self) -> str:
        return self._entity

    @property
    def bundle(self) -> str:
        return self._bundle

    @property
    def relationship_groups(self) -> typing.Sequence[str]:
        return self.config.relationship_groups

    @property
    def field_map(self) -> typing.Mapping[str, FieldPath]:
        return self._field_map()

    def _build_field_map(self) -> typing.Mapping[str, FieldPath]:
        paths: typing.Dict[str, FieldPath] = {
            key: ("data", "attributes", key) for key in self.attrs
        }
        for group in self.relationship_groups:
            for key in self.relationship_field_names(group):
                paths[key] = ("data", group, key)
        return types.MappingProxyType(paths)

    def _find_id(self) -> typing.Any:
        for key, value in self.attrs.items():
            if INTERNAL_ID_TEST.matches(key):
                return value
        return None

    def relationship_field_names(self, group: str) -> typing.List[str]:
        """
        Returns the keys of a relationship group that are fields.

        :param str group: a top level member of the resource, such as ``relationships``.
        """
        fields = self.data.get(group) or {}
        return [k for k in fields if matches_any(self.config.relationship_tests, k)]

    def get_path(self, path: FieldPath) -> typing.Any:
        return functools.reduce(operator.getitem, path, self.res)

    def field(self, name: str) -> typing.Any:
        """
        Returns the raw structure of a field.

        :raises FieldNotFoundError: if the entity has no such field.
        """
        try:
            path = self.field_map[name]
        except KeyError:
            raise FieldNotFoundError(name, self.entity) from None
        return self.get_path(path)

    async def value(self, name: str) -> typing.Any:
        """
        Returns the (first) value of a field, with relationships hydrated.
        """
        field = self.field(name)
        processor = self.config.value_processors.get(name)
        if processor is not None:
            result = processor(field)
            if inspect.isawaitable(result):
                result = await result
            return result
        return await self.get_field_value(field)

    async def all_values(self, name: str) -> typing.Any:
        """
        Returns every value of a field, with relationships hydrated.
        """
        fields = self.field(name)
        if isinstance(fields, collections.abc.Mapping) and isinstance(fields.get("data"), list):
            fields = fields["data"]
        if isinstance(fields, list):
            return list(await asyncio.gather(*(self.get_field_value(f) for f in fields)))
        return fields

    async def get_field_value(self, structure: typing.Any, index: int = 0) -> typing.Any:
        """
        Given an input of field content, return an appropriate value at the given index.

        :param Any structure: the raw content of a field.
        :param int index: the position to pick in a to-many structure.
        """
        value = structure
        if isinstance(structure, collections.abc.Mapping):
            data = structure.get("data")
            if isinstance(data, list):
                value = data[index] if index < len(data) else None
            elif data:
                value = data
        if isinstance(value, list) and index < len(value) and value[index]:
            value = value[index]
        if self.config.is_relationship(value):
            return await self.resolve_reference(
                classify_reference(value, self.config.reference_unwrappers)
            )
        return value

    async def resolve_reference(self, reference: Reference) -> typing.Any:
        entity = self.repository.get_relationship(reference.raw)
        if entity is None:
            entity = await self.repository.get_entity(reference.lookup, self.depth + 1)
        if isinstance(reference, WrappedReference) and reference.unwrapper is not None:
            return await reference.unwrapper(entity)
        return entity

    async def load_relationships(
        self, depth: typing.Optional[int] = None
    ) -> typing.List["SingleEntity"]:
        """
        Hydrates every relationship reachable from this entity that has not been
        traversed yet, concurrently, at ``depth + 1``.

        :param Optional[int] depth: the depth of this entity; defaults to the depth
                                    it was built at.
        :return: The newly hydrated entities.
        """
        if depth is None:
            depth = self.depth
        # every group is extracted before anything gets claimed
        lookups = [
            lookup
            for group in self.relationship_groups
            for lookup in self.relationship_group_lookups(group).values()
        ]
        claimed = [
            lookup
            for lookup in lookups
            if not self.repository.has_been_traversed(lookup) and self.repository.claim(lookup)
        ]
        if not claimed:
            return []
        logger.debug(
            f"{self.entity}--{self.bundle} {self.uuid}: "
            f"loading {len(claimed)} relationships at depth {depth + 1}"
        )
        try:
            return list(
                await asyncio.gather(
                    *(self.repository.get_entity(lookup, depth + 1) for lookup in claimed)
                )
            )
        except BaseException:
            for lookup in claimed:
                self.repository.release(lookup)
            raise

    def relationship_group_lookups(self, group: str) -> typing.Dict[str, LookupKey]:
        fields = self.data.get(group)
        if not fields:
            return {}
        return self.parse_relationship_lookups(
            [fields[k] for k in self.relationship_field_names(group)]
        )

    def parse_relationship_lookups(self, items: typing.Any) -> typing.Dict[str, LookupKey]:
        return collect_lookups(items, self.config.is_relationship, self.repository.endpoint)

    def __str__(self):
        return (
            f"Drupal '{self.entity}' entity of bundle '{self.bundle}'. "
            f"Has fields: {', '.join(self.field_map)}."
        )

    def __repr__(self):
        return f"<{type(self).__name__} {self.entity}--{self.bundle} {self.uuid}>"

    def __init__(
        self,
        payload: JSONObject,
        repository: EntityRepository,
        config: typing.Optional[EntityConfig] = None,
        depth: int = 0,
    ):
        config = config or DEFAULT_CONFIG
        res = config.clean_entity(as_document(payload))
        data = res.get("data")
        if not isinstance(data, collections.abc.Mapping):
            raise InvalidDocumentError("a single resource document must carry an object in data")
        super().__init__(res, repository, config, depth)
        self.data = typing.cast(typing.Dict[str, typing.Any], data)
        self._entity, self._bundle = split_type(data.get("type"))
        self.attrs = data.get("attributes") or {}
        self._field_map = Deferred(self._build_field_map)
        self._id = Deferred(self._find_id)


class EntityCollection(Entity):
    resources: typing.Sequence[JSONObject]

    @property
    def is_collection(self) -> bool:
        return True

    def entity_at(self, index: int) -> SingleEntity:
        return SingleEntity(
            {"data": self.resources[index]}, self.repository, self.config, self.depth
        )

    def __len__(self) -> int:
        return len(self.resources)

    def __getitem__(self, index: int) -> SingleEntity:
        return self.entity_at(index)

    def __iter__(self) -> typing.Iterator[SingleEntity]:
        for index in range(len(self.resources)):
            yield self.entity_at(index)

    def __repr__(self):
        return f"<{type(self).__name__} of {len(self.resources)} resources>"

    def __init__(
        self,
        payload: JSONObject,
        repository: EntityRepository,
        config: typing.Optional[EntityConfig] = None,
        depth: int = 0,
    ):
        config = config or DEFAULT_CONFIG
        res = config.clean_entity(payload)
        data = res.get("data")
        if not isinstance(data, list):
            raise InvalidDocumentError("a collection document must carry an array in data")
        super().__init__(res, repository, config, depth)
        self.resources = data


def build_entity(
    payload: JSONObject,
    repository: EntityRepository,
    config: typing.Optional[EntityConfig] = None,
    depth: int = 0,
) -> Entity:
    """
    Builds a :py:class:`SingleEntity` or an :py:class:`EntityCollection`
    depending on the shape of the payload's ``data``.
    """
    document = as_document(payload)
    if isinstance(document.get("data"), list):
        return EntityCollection(document, repository, config, depth)
    return SingleEntity(document, repository, config, depth)
