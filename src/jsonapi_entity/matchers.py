"""
Name matchers decide which attribute and relationship keys of a resource
are kept by the transformer and which relationship keys become fields.

A rule set is a plain sequence of :py:class:`NameMatcher` objects; a name is
accepted when any rule in the sequence accepts it.
"""
import abc
import re
import typing


class NameMatcher(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def matches(self, name: str) -> bool:
        ...  # pragma: nocover


class PatternMatcher(NameMatcher):
    """
    Accepts names in which the regular expression matches (``re.search``
    semantics, so anchor the pattern where needed).
    """

    pattern: typing.Pattern[str]

    def matches(self, name: str) -> bool:
        return self.pattern.search(name) is not None

    def __repr__(self):
        return f"PatternMatcher({self.pattern.pattern!r})"

    def __init__(self, pattern: typing.Union[str, typing.Pattern[str]]):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern


class ExactMatcher(NameMatcher):
    names: typing.FrozenSet[str]

    def matches(self, name: str) -> bool:
        return name in self.names

    def __repr__(self):
        return f"ExactMatcher({sorted(self.names)!r})"

    def __init__(self, names: typing.Iterable[str]):
        self.names = frozenset(names)


RuleSet = typing.Sequence[NameMatcher]


def matches_any(rules: RuleSet, name: str) -> bool:
    return any(rule.matches(name) for rule in rules)


DEFAULT_RELATIONSHIP_TESTS: RuleSet = (
    PatternMatcher(r"^field_"),
    ExactMatcher({"paragraphs"}),
)

DEFAULT_FIELD_TESTS: RuleSet = (
    PatternMatcher(r"^field_"),
    PatternMatcher(r"^drupal_internal__?[a-z]?id$"),
    ExactMatcher({"label", "title", "status", "path", "paragraphs"}),
)

INTERNAL_ID_TEST: NameMatcher = PatternMatcher(r"^drupal_internal__[a-z]?id$")
