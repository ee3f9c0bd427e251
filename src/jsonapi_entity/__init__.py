from .config import EntityConfig  # noqa: F401
from .entity import Entity, EntityCollection, SingleEntity, build_entity  # noqa: F401
from .exceptions import (  # noqa: F401
    EntityFetchError,
    FieldNotFoundError,
    InvalidDocumentError,
    InvalidResourceTypeError,
    JSONAPIEntityException,
    SerializationError,
)
from .interfaces import CacheStore, EntityRepository  # noqa: F401
from .models import LookupKey, is_resource_reference, split_type  # noqa: F401
from .transformer import Transformer, transform  # noqa: F401
