"""Query predicates selecting documents by stored state value."""

from typing import Any


def _flatten(values: tuple) -> list[Any]:
    if len(values) == 1 and isinstance(values[0], (list, tuple, set, frozenset)):
        return list(values[0])
    return list(values)


class ScopeBuilder:
    """
    Builds membership predicates for one state attribute.

    Values are stored representations, not state names. Predicates are plain
    mappings and are not meant to be combined with other predicates.
    """

    def __init__(self, attribute: str):
        self.attribute = attribute

    def with_states(self, *values: Any) -> dict[str, dict[str, list[Any]]]:
        return {self.attribute: {"in": _flatten(values)}}

    def without_states(self, *values: Any) -> dict[str, dict[str, list[Any]]]:
        return {self.attribute: {"not_in": _flatten(values)}}
