from __future__ import annotations

from hamalert_cli.domain.reconciliation import classify
from tests.helpers.rules import make_record, make_remote


def test_classification_buckets_partition_live_set() -> None:
    x, y, z, w = (make_record(call) for call in ("W1AW", "N0CALL", "K0TEST", "DL1ABC"))
    live = [make_remote(record) for record in (x, y, z, w)]

    result = classify(live, permanent=[x], reference=[y, w])

    assert [rule.record for rule in result.permanent_matches] == [x]
    assert [rule.record for rule in result.reference_matches] == [y, w]
    assert [rule.record for rule in result.unexpected] == [z]
    assert result.total == len(live)


def test_without_reference_every_non_permanent_rule_is_unexpected() -> None:
    x, y, z = (make_record(call) for call in ("W1AW", "N0CALL", "K0TEST"))
    live = [make_remote(record) for record in (x, y, z)]

    result = classify(live, permanent=[x])

    assert result.reference_matches == []
    assert [rule.record for rule in result.unexpected] == [y, z]


def test_permanent_takes_precedence_over_reference() -> None:
    x = make_record("W1AW")
    live = [make_remote(x)]

    result = classify(live, permanent=[x], reference=[x])

    assert len(result.permanent_matches) == 1
    assert result.reference_matches == []


def test_empty_reference_differs_from_missing_reference_only_in_name() -> None:
    y = make_record("N0CALL")
    live = [make_remote(y)]

    assert classify(live, permanent=[], reference=[]).unexpected == live
    assert classify(live, permanent=[], reference=None).unexpected == live


def test_duplicate_live_rules_each_land_in_one_bucket() -> None:
    y = make_record("N0CALL")
    live = [make_remote(y, "a"), make_remote(y, "b"), make_remote(make_record("K0TEST"), "c")]

    result = classify(live, permanent=[], reference=[y])

    assert [rule.remote_id for rule in result.reference_matches] == ["a", "b"]
    assert [rule.remote_id for rule in result.unexpected] == ["c"]
    assert result.total == 3
