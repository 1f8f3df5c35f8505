from __future__ import annotations

from hamalert_cli.domain.reconciliation import (
    SwitchPlanner,
    UnexpectedResolution,
    build_reconciliation_plan,
    classify,
    merge_into_profile,
)
from tests.helpers.rules import (
    FakeTriggerSource,
    InMemoryMarker,
    InMemoryPermanentStore,
    InMemoryProfileStore,
    ScriptedPrompter,
    make_record,
    make_remote,
)


def _planner(
    triggers: FakeTriggerSource,
    profiles: InMemoryProfileStore,
    permanent: InMemoryPermanentStore,
    marker: InMemoryMarker,
    prompter: ScriptedPrompter,
) -> SwitchPlanner:
    return SwitchPlanner(
        triggers=triggers,
        profiles=profiles,
        permanent=permanent,
        marker=marker,
        prompter=prompter,
    )


def test_plan_without_marker_flags_every_non_permanent_rule() -> None:
    x, y, z, w = (make_record(call) for call in ("W1AW", "N0CALL", "K0TEST", "DL1ABC"))
    live = [make_remote(record) for record in (x, y, z)]

    plan = build_reconciliation_plan(
        target="portable",
        target_records=[y, w],
        live=live,
        permanent=[x],
    )

    assert [rule.record for rule in plan.keep] == [x]
    assert [rule.record for rule in plan.to_delete] == [y, z]
    assert plan.to_create == [y, w]
    assert [rule.record for rule in plan.unexpected] == [y, z]


def test_to_delete_is_every_live_rule_not_matching_permanent() -> None:
    x, y, z = (make_record(call) for call in ("W1AW", "N0CALL", "K0TEST"))
    live = [make_remote(z), make_remote(x), make_remote(y)]

    plan = build_reconciliation_plan(
        target="home",
        target_records=[],
        live=live,
        permanent=[x],
        reference="home",
        reference_records=[y, z],
    )

    permanent_ids = {rule.remote_id for rule in classify(live, [x]).permanent_matches}
    assert [rule.remote_id for rule in plan.to_delete] == [
        rule.remote_id for rule in live if rule.remote_id not in permanent_ids
    ]
    assert plan.unexpected == []


def test_target_records_are_created_verbatim() -> None:
    target = [make_record("N0CALL", actions=("url",), options={"repeat": 1})]

    plan = build_reconciliation_plan(target="t", target_records=target, live=[], permanent=[])

    assert plan.to_create == target
    assert plan.to_create[0].options is not None


def test_merge_into_profile_skips_rules_already_present() -> None:
    y, z = make_record("N0CALL"), make_record("K0TEST")

    merged, added = merge_into_profile([y], [make_record("N0CALL", actions=("url",)), z])

    assert merged == [y, z]
    assert added == 1


def test_planner_refetches_live_set_each_time() -> None:
    triggers = FakeTriggerSource([make_remote(make_record("N0CALL"))])
    profiles = InMemoryProfileStore({"home": [make_record("N0CALL")]})
    planner = _planner(
        triggers, profiles, InMemoryPermanentStore(), InMemoryMarker("home"), ScriptedPrompter()
    )

    planner.plan("home")
    planner.plan("home")

    assert triggers.fetch_calls == 2


def test_resolution_is_none_when_nothing_unexpected() -> None:
    y = make_record("N0CALL")
    prompter = ScriptedPrompter()
    planner = _planner(
        FakeTriggerSource([make_remote(y)]),
        InMemoryProfileStore({"home": [y], "portable": []}),
        InMemoryPermanentStore(),
        InMemoryMarker("home"),
        prompter,
    )

    plan = planner.plan("portable")

    assert planner.resolve_unexpected(plan) is UnexpectedResolution.NONE
    assert prompter.choose_calls == []


def test_save_to_current_merges_into_previous_profile() -> None:
    y, z = make_record("N0CALL"), make_record("K0TEST")
    profiles = InMemoryProfileStore({"home": [y], "portable": []})
    prompter = ScriptedPrompter(choices=["Save them to profile 'home' first"])
    planner = _planner(
        FakeTriggerSource([make_remote(y), make_remote(z)]),
        profiles,
        InMemoryPermanentStore(),
        InMemoryMarker("home"),
        prompter,
    )

    plan = planner.plan("portable")
    resolution = planner.resolve_unexpected(plan)

    assert resolution is UnexpectedResolution.SAVE_TO_CURRENT
    assert profiles.profiles["home"] == [y, z]
    assert [rule.record for rule in plan.to_delete] == [y, z]
    assert plan.to_create == []


def test_without_marker_only_delete_and_cancel_are_offered() -> None:
    prompter = ScriptedPrompter(choices=["Delete them"])
    planner = _planner(
        FakeTriggerSource([make_remote(make_record("N0CALL"))]),
        InMemoryProfileStore({"portable": []}),
        InMemoryPermanentStore(),
        InMemoryMarker(),
        prompter,
    )

    resolution = planner.resolve_unexpected(planner.plan("portable"))

    assert resolution is UnexpectedResolution.DELETE
    _, options = prompter.choose_calls[0]
    assert options == ["Delete them", "Cancel"]


def test_prompt_cancellation_resolves_to_cancel() -> None:
    planner = _planner(
        FakeTriggerSource([make_remote(make_record("N0CALL"))]),
        InMemoryProfileStore({"portable": []}),
        InMemoryPermanentStore(),
        InMemoryMarker(),
        ScriptedPrompter(),
    )

    assert planner.resolve_unexpected(planner.plan("portable")) is UnexpectedResolution.CANCEL


def test_stale_marker_is_treated_as_no_baseline_and_recreated_on_save() -> None:
    y = make_record("N0CALL")
    profiles = InMemoryProfileStore({"portable": []})
    prompter = ScriptedPrompter(choices=["Save them to profile 'gone' first"])
    planner = _planner(
        FakeTriggerSource([make_remote(y)]),
        profiles,
        InMemoryPermanentStore(),
        InMemoryMarker("gone"),
        prompter,
    )

    plan = planner.plan("portable")
    resolution = planner.resolve_unexpected(plan)

    assert [rule.record for rule in plan.unexpected] == [y]
    assert resolution is UnexpectedResolution.SAVE_TO_CURRENT
    assert profiles.profiles["gone"] == [y]
