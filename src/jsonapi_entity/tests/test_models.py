import pytest

from ..exceptions import InvalidResourceTypeError
from ..models import (
    DirectReference,
    LookupKey,
    WrappedReference,
    classify_reference,
    is_resource_reference,
    split_type,
)


@pytest.mark.parametrize(
    "type_",
    [
        "node--article",
        "paragraph--from_library",
        "taxonomy_term--tags",
        "media--remote_video",
    ],
)
def test_split_type_reconstructs(type_):
    entity, bundle = split_type(type_)
    assert f"{entity}--{bundle}" == type_


def test_split_type_invalid():
    with pytest.raises(InvalidResourceTypeError) as excinfo:
        split_type("node")
    assert "node" in str(excinfo.value)
    with pytest.raises(InvalidResourceTypeError):
        split_type(None)


@pytest.mark.parametrize(
    "value, expected",
    [
        ({"type": "node--article", "id": "1"}, True),
        ({"type": "node--article", "id": "1", "meta": {}}, True),
        ({"type": "node", "id": "1"}, False),
        ({"type": "n--article", "id": "1"}, False),
        ({"type": "node--article"}, False),
        ({"type": "node--article", "id": ""}, False),
        ([{"type": "node--article", "id": "1"}], False),
        ("node--article", False),
        (None, False),
    ],
)
def test_is_resource_reference(value, expected):
    assert is_resource_reference(value) is expected


def test_lookup_key_from_reference():
    lookup = LookupKey.from_reference({"type": "taxonomy_term--tags", "id": "abc"})
    assert lookup == LookupKey(entity="taxonomy_term", bundle="tags", uuid="abc")
    assert lookup.type == "taxonomy_term--tags"
    assert len({lookup, LookupKey("taxonomy_term", "tags", "abc")}) == 1


def test_classify_reference():
    async def unwrap(entity):
        return entity

    unwrappers = {("paragraph", "from_library"): unwrap}

    direct = classify_reference({"type": "paragraph--text", "id": "1"}, unwrappers)
    assert type(direct) is DirectReference

    wrapped = classify_reference({"type": "paragraph--from_library", "id": "2"}, unwrappers)
    assert isinstance(wrapped, WrappedReference)
    assert wrapped.unwrapper is unwrap
    assert wrapped.lookup == LookupKey("paragraph", "from_library", "2")
