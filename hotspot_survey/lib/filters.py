from __future__ import annotations

from typing import Callable, List, Mapping, Optional, Sequence


RecordFilter = Callable[[Mapping[str, str]], bool]


class FilterSpecError(ValueError):
    """Raised when a filter clause is not of the form 'field=value'."""


def _field_equals(field: str, value: str) -> RecordFilter:
    def predicate(record: Mapping[str, str]) -> bool:
        return record.get(field) == value

    predicate.__name__ = f"{field}=={value!r}"
    return predicate


def parse_filters(spec: Optional[str]) -> List[RecordFilter]:
    """
    Compile 'field1=value1,field2=value2' into equality predicates.

    Values are compared as exact strings. There is no escaping, so values
    cannot contain ',' and anything after a second '=' in a clause is ignored.
    """
    if not spec:
        return []

    filters: List[RecordFilter] = []
    for clause in spec.split(","):
        parts = clause.split("=")
        if len(parts) < 2:
            raise FilterSpecError(f"Filter clause '{clause}' must look like field=value")
        filters.append(_field_equals(parts[0], parts[1]))
    return filters


def matches_all(record: Mapping[str, str], filters: Sequence[RecordFilter]) -> bool:
    return all(predicate(record) for predicate in filters)
