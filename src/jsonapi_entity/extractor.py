import collections.abc
import typing

from .models import LookupKey


def collect_lookups(
    items: typing.Any,
    is_relationship: typing.Callable[[typing.Any], bool],
    endpoint: typing.Callable[[LookupKey], str],
) -> typing.Dict[str, LookupKey]:
    """
    Recursively seeks out every relationship reference in ``items``.

    Mappings contribute their values and sequences their elements; descent stops
    at a value accepted by ``is_relationship``. Results are keyed by ``endpoint``
    so a reference reached twice is only reported once.
    """
    lookups: typing.Dict[str, LookupKey] = {}
    _collect(items, is_relationship, endpoint, lookups)
    return lookups


def _collect(items, is_relationship, endpoint, lookups) -> None:
    if is_relationship(items):
        lookup = LookupKey.from_reference(items)
        lookups[endpoint(lookup)] = lookup
        return
    if isinstance(items, collections.abc.Mapping):
        children: typing.Iterable[typing.Any] = items.values()
    elif isinstance(items, collections.abc.Sequence) and not isinstance(items, (str, bytes)):
        children = items
    else:
        return
    for item in children:
        _collect(item, is_relationship, endpoint, lookups)
