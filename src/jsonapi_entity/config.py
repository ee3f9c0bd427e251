import dataclasses
import typing

from .matchers import DEFAULT_RELATIONSHIP_TESTS, RuleSet
from .models import Unwrapper, is_resource_reference
from .resolvers import DEFAULT_UNWRAPPERS
from .transformer import transform
from .types import JSONObject, MutableJSONObject

ValueProcessor = typing.Callable[[typing.Any], typing.Any]


@dataclasses.dataclass
class EntityConfig:
    """
    Options shared by every entity built against a repository.

    :param relationship_tests: rules selecting which keys of a relationship group are fields.
    :param clean_entity: the transform applied to a raw payload at construction time.
    :param value_processors: per-field-name callables that replace the default value
                             resolution; they receive the raw field structure and may
                             return an awaitable.
    :param is_relationship: the predicate identifying relationship references.
    :param reference_unwrappers: ``(entity, bundle)`` keyed table of unwrappers applied
                                 after hydrating a reference of that type.
    :param relationship_groups: the top-level resource members scanned for relationships.
    """

    relationship_tests: RuleSet = DEFAULT_RELATIONSHIP_TESTS
    clean_entity: typing.Callable[[JSONObject], MutableJSONObject] = transform
    value_processors: typing.Mapping[str, ValueProcessor] = dataclasses.field(
        default_factory=dict
    )
    is_relationship: typing.Callable[[typing.Any], bool] = is_resource_reference
    reference_unwrappers: typing.Mapping[typing.Tuple[str, str], Unwrapper] = dataclasses.field(
        default_factory=lambda: dict(DEFAULT_UNWRAPPERS)
    )
    relationship_groups: typing.Sequence[str] = ("relationships",)


DEFAULT_CONFIG = EntityConfig()
