"""
The transformer strips a raw JSON:API document down to what the entity model
needs: the ``jsonapi`` and ``links`` envelope members go away, and attributes
and relationships are filtered through an allow-list of field names.
"""
import collections.abc
import copy
import typing

from .matchers import DEFAULT_FIELD_TESTS, RuleSet, matches_any
from .types import JSONObject, JSONValue, MutableJSONObject

FIELD_SETS = ("attributes", "relationships")


class Transformer:
    field_tests: RuleSet

    def __call__(self, payload: JSONObject) -> MutableJSONObject:
        """
        Returns a cleaned copy of the document; the input is left untouched.

        :param JSONObject payload: a single-resource or collection document.
        """
        res = copy.deepcopy(dict(payload))
        res.pop("jsonapi", None)
        res.pop("links", None)
        data = res.get("data")
        if isinstance(data, collections.abc.Mapping):
            res["data"] = self.clean_resource(data)
        elif isinstance(data, list):
            res["data"] = [
                self.clean_resource(item) if isinstance(item, collections.abc.Mapping) else item
                for item in data
            ]
        return res

    def clean_resource(self, resource: JSONObject) -> MutableJSONObject:
        cleaned = dict(resource)
        cleaned.pop("links", None)
        for field_set in FIELD_SETS:
            cleaned[field_set] = self.clean_fields(cleaned.get(field_set) or {})
        return cleaned

    def clean_fields(self, fields: JSONObject) -> MutableJSONObject:
        return {
            name: self.clean_field(value)
            for name, value in fields.items()
            if matches_any(self.field_tests, name)
        }

    def clean_field(self, field: JSONValue) -> JSONValue:
        if isinstance(field, collections.abc.Mapping):
            field = dict(field)
            links = field.get("links")
            if isinstance(links, collections.abc.Mapping) and links.get("self"):
                del field["links"]
            if isinstance(field.get("data"), list):
                field["data"] = self.clean_field(field["data"])
        elif isinstance(field, list):
            field = [self.clean_field(f) for f in field]
        return field

    def __init__(self, field_tests: RuleSet = DEFAULT_FIELD_TESTS):
        self.field_tests = field_tests


default_transformer = Transformer()


def transform(payload: JSONObject) -> MutableJSONObject:
    return default_transformer(payload)
