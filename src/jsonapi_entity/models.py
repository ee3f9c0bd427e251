"""
Classes in :py:mod:`jsonapi_entity.models` describe the pieces of a Drupal
JSON:API resource the resolution engine works with: the ``kind--bundle``
type string, lookup keys and relationship references.
"""
import collections.abc
import dataclasses
import typing

from .exceptions import InvalidResourceTypeError
from .types import JSONObject

TYPE_SEPARATOR = "--"

if typing.TYPE_CHECKING:  # pragma: nocover
    from .entity import SingleEntity

Unwrapper = typing.Callable[["SingleEntity"], typing.Awaitable[typing.Any]]


def split_type(type_: typing.Any) -> typing.Tuple[str, str]:
    """
    Splits a resource type such as ``node--article`` into its entity kind and bundle.

    :param str type_: the value of a resource's ``type`` member.
    :return: a tuple of the entity kind and the bundle.
    :raises InvalidResourceTypeError: if the separator is missing.
    """
    if not isinstance(type_, str) or TYPE_SEPARATOR not in type_:
        raise InvalidResourceTypeError(type_)
    entity, bundle = type_.split(TYPE_SEPARATOR, 1)
    return entity, bundle


def is_resource_reference(value: typing.Any) -> bool:
    """
    Tells if the value looks like a pointer to another resource, that is,
    a mapping carrying ``type`` and ``id`` where ``type`` is a ``kind--bundle`` string.
    """
    if not isinstance(value, collections.abc.Mapping):
        return False
    type_ = value.get("type")
    return bool(
        type_ and value.get("id") and isinstance(type_, str) and type_.find(TYPE_SEPARATOR) > 1
    )


@dataclasses.dataclass(frozen=True)
class LookupKey:
    """
    A :py:class:`LookupKey` identifies a resource to hydrate.
    """

    entity: str
    bundle: str
    uuid: str

    @property
    def type(self) -> str:
        return f"{self.entity}{TYPE_SEPARATOR}{self.bundle}"

    @classmethod
    def from_reference(cls, reference: JSONObject) -> "LookupKey":
        entity, bundle = split_type(reference["type"])
        return cls(entity=entity, bundle=bundle, uuid=reference["id"])


@dataclasses.dataclass(frozen=True)
class DirectReference:
    """
    A reference that resolves to the hydrated entity itself.
    """

    lookup: LookupKey
    raw: JSONObject = dataclasses.field(compare=False, hash=False)


@dataclasses.dataclass(frozen=True)
class WrappedReference(DirectReference):
    """
    A reference to a wrapper entity whose payload is returned in place of the wrapper.
    """

    unwrapper: typing.Optional[Unwrapper] = dataclasses.field(
        default=None, compare=False, hash=False
    )


Reference = typing.Union[DirectReference, WrappedReference]


def classify_reference(
    value: JSONObject,
    unwrappers: typing.Mapping[typing.Tuple[str, str], Unwrapper],
) -> Reference:
    lookup = LookupKey.from_reference(value)
    unwrapper = unwrappers.get((lookup.entity, lookup.bundle))
    if unwrapper is None:
        return DirectReference(lookup=lookup, raw=value)
    return WrappedReference(lookup=lookup, raw=value, unwrapper=unwrapper)
