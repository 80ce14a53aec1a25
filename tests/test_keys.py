from __future__ import annotations

from dataclasses import dataclass

import pytest

from pymapstore import KeyExtractionError, comparator_for, default_comparator, field_key
from pymapstore.keys import sort_key


@dataclass
class Record:
    uid: str


def test_field_key_reads_mappings_and_attributes() -> None:
    extract = field_key()
    assert extract({"uid": 1}) == 1
    assert extract(Record(uid="r1")) == "r1"
    assert field_key("id")({"id": 9}) == 9


def test_field_key_missing_field_raises() -> None:
    with pytest.raises(KeyExtractionError) as exc_info:
        field_key("id")(Record(uid="r1"))
    assert exc_info.value.field == "id"
    assert "Record" in str(exc_info.value)


def test_default_comparator_is_three_way() -> None:
    key = field_key()
    assert default_comparator(key, {"uid": 1}, {"uid": 2}) == -1
    assert default_comparator(key, {"uid": 2}, {"uid": 1}) == 1
    assert default_comparator(key, {"uid": "a"}, {"uid": "a"}) == 0


def test_sort_key_orders_by_comparator() -> None:
    comparator = comparator_for(field_key())
    values = [{"uid": 3}, {"uid": 1}, {"uid": 2}]

    assert sorted(values, key=sort_key(comparator)) == [{"uid": 1}, {"uid": 2}, {"uid": 3}]
