import typing

from .interfaces import CacheStore
from .types import JSONObject


class MemoryCacheStore(CacheStore):
    _resources: typing.Dict[str, JSONObject]

    def get(self, endpoint: str) -> typing.Optional[JSONObject]:
        return self._resources.get(endpoint)

    def set(self, endpoint: str, resource: JSONObject) -> None:
        self._resources[endpoint] = resource

    def items(self) -> typing.Iterable[typing.Tuple[str, JSONObject]]:
        return list(self._resources.items())

    def clear(self) -> None:
        self._resources.clear()

    def __len__(self) -> int:
        return len(self._resources)

    def __init__(self):
        self._resources = {}
