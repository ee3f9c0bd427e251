from ..models import LookupKey, is_resource_reference
from .testing import ref


def endpoint(lookup):
    return f"{lookup.entity}/{lookup.bundle}/{lookup.uuid}"


def test_collects_nested_references():
    from ..extractor import collect_lookups

    items = [
        {"data": ref("user--user", "u1")},
        {
            "data": [ref("taxonomy_term--tags", "t1"), ref("taxonomy_term--tags", "t2")],
            "meta": {"nested": {"deeper": [ref("media--image", "m1")]}},
        },
        "scalar",
        None,
        42,
    ]
    assert collect_lookups(items, is_resource_reference, endpoint) == {
        "user/user/u1": LookupKey("user", "user", "u1"),
        "taxonomy_term/tags/t1": LookupKey("taxonomy_term", "tags", "t1"),
        "taxonomy_term/tags/t2": LookupKey("taxonomy_term", "tags", "t2"),
        "media/image/m1": LookupKey("media", "image", "m1"),
    }


def test_deduplicates():
    from ..extractor import collect_lookups

    items = [
        {"data": [ref("taxonomy_term--tags", "t1"), ref("taxonomy_term--tags", "t1")]},
        {"data": ref("taxonomy_term--tags", "t1")},
    ]
    assert list(collect_lookups(items, is_resource_reference, endpoint)) == [
        "taxonomy_term/tags/t1"
    ]


def test_stops_at_references():
    from ..extractor import collect_lookups

    reference = dict(ref("node--article", "n1"), meta={"inner": ref("node--article", "n2")})
    assert list(collect_lookups(reference, is_resource_reference, endpoint)) == [
        "node/article/n1"
    ]


def test_nothing_to_collect():
    from ..extractor import collect_lookups

    assert collect_lookups({}, is_resource_reference, endpoint) == {}
    assert collect_lookups("node--article", is_resource_reference, endpoint) == {}
