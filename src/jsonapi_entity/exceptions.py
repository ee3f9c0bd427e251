import abc
import typing


class JSONAPIEntityException(Exception, metaclass=abc.ABCMeta):
    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover

    def __str__(self):
        return self.message


class InvalidResourceTypeError(JSONAPIEntityException, ValueError):
    type_: typing.Any

    @property
    def message(self):
        return f'resource type {self.type_!r} does not contain the "--" separator between entity and bundle'

    def __init__(self, type_: typing.Any):
        self.type_ = type_


class FieldNotFoundError(JSONAPIEntityException, KeyError):
    name: str
    entity: str

    @property
    def message(self):
        return f"The field ({self.name}) is not part of the entity ({self.entity})"

    def __init__(self, name: str, entity: str):
        self.name = name
        self.entity = entity


class InvalidDocumentError(JSONAPIEntityException, ValueError):
    detail: str

    @property
    def message(self):
        return f"invalid JSON:API document: {self.detail}"

    def __init__(self, detail: str):
        self.detail = detail


class EntityFetchError(JSONAPIEntityException):
    endpoint: str
    status_code: typing.Optional[int]

    @property
    def message(self):
        if self.status_code is None:
            return f"failed to fetch {self.endpoint} ({self.__cause__!s})"
        return f"failed to fetch {self.endpoint} (HTTP {self.status_code})"

    def __init__(self, endpoint: str, status_code: typing.Optional[int] = None):
        self.endpoint = endpoint
        self.status_code = status_code


class SerializationError(JSONAPIEntityException, ValueError):
    detail: str

    @property
    def message(self):
        return f"cannot restore entity: {self.detail}"

    def __init__(self, detail: str):
        self.detail = detail
