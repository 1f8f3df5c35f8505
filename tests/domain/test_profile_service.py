from __future__ import annotations

import pytest

from hamalert_cli.domain.errors import ProfileNotFoundError
from hamalert_cli.domain.profiles import ProfileService, SaveStatus, validate_profile_name
from hamalert_cli.domain.reconciliation import CorrectiveAction, build_report
from hamalert_cli.ui.formatting import describe_rule
from tests.helpers.rules import (
    InMemoryMarker,
    InMemoryPermanentStore,
    InMemoryProfileStore,
    ScriptedPrompter,
    make_record,
    make_remote,
)


def _service(
    *,
    profiles: InMemoryProfileStore | None = None,
    permanent: InMemoryPermanentStore | None = None,
    marker: InMemoryMarker | None = None,
    prompter: ScriptedPrompter | None = None,
) -> ProfileService:
    return ProfileService(
        profiles=profiles or InMemoryProfileStore(),
        permanent=permanent or InMemoryPermanentStore(),
        marker=marker or InMemoryMarker(),
        prompter=prompter or ScriptedPrompter(),
    )


@pytest.mark.parametrize("name", ["", "   ", ".hidden", "a/b", "a\\b", "c:d", "what?"])
def test_invalid_profile_names_are_rejected(name: str) -> None:
    with pytest.raises(ValueError):
        validate_profile_name(name)


def test_valid_profile_name_is_stripped() -> None:
    assert validate_profile_name("  pota-2024 ") == "pota-2024"


def test_save_from_live_excludes_permanent_and_records_marker() -> None:
    x, y = make_record("W1AW"), make_record("N0CALL")
    profiles = InMemoryProfileStore()
    marker = InMemoryMarker()
    service = _service(profiles=profiles, permanent=InMemoryPermanentStore([x]), marker=marker)

    result = service.save("home", [x, y], from_live=True)

    assert result.status is SaveStatus.SAVED
    assert (result.saved, result.excluded_permanent) == (1, 1)
    assert profiles.profiles["home"] == [y]
    assert marker.name == "home"


def test_save_from_backup_leaves_marker_alone() -> None:
    marker = InMemoryMarker("other")
    service = _service(marker=marker)

    result = service.save("home", [make_record("N0CALL")], from_live=False)

    assert result.status is SaveStatus.SAVED
    assert not result.marker_updated
    assert marker.name == "other"


def test_identical_content_is_not_rewritten_but_marker_is_set() -> None:
    y = make_record("N0CALL")
    profiles = InMemoryProfileStore({"home": [y]})
    marker = InMemoryMarker()
    prompter = ScriptedPrompter()
    service = _service(profiles=profiles, marker=marker, prompter=prompter)

    result = service.save("home", [y], from_live=True)

    assert result.status is SaveStatus.UNCHANGED
    assert profiles.saves == []
    assert prompter.confirm_calls == []
    assert marker.name == "home"


def test_overwrite_requires_confirmation() -> None:
    profiles = InMemoryProfileStore({"home": [make_record("N0CALL")]})
    declined = _service(profiles=profiles, prompter=ScriptedPrompter(confirms=[False]))

    result = declined.save("home", [make_record("K0TEST")], from_live=True)

    assert result.status is SaveStatus.CANCELLED
    assert profiles.profiles["home"] == [make_record("N0CALL")]

    accepted = _service(profiles=profiles, prompter=ScriptedPrompter(confirms=[True]))
    assert accepted.save("home", [make_record("K0TEST")], from_live=True).status is SaveStatus.SAVED
    assert profiles.profiles["home"] == [make_record("K0TEST")]


def test_delete_unknown_profile_lists_alternatives() -> None:
    service = _service(profiles=InMemoryProfileStore({"home": [], "portable": []}))

    with pytest.raises(ProfileNotFoundError) as excinfo:
        service.delete("missing")

    assert excinfo.value.known == ("home", "portable")
    assert "home, portable" in str(excinfo.value)


def test_delete_clears_marker_naming_deleted_profile() -> None:
    profiles = InMemoryProfileStore({"home": []})
    marker = InMemoryMarker("home")
    service = _service(profiles=profiles, marker=marker, prompter=ScriptedPrompter(confirms=[True]))

    assert service.delete("home")
    assert "home" not in profiles.profiles
    assert marker.name is None


def test_delete_cancelled_keeps_profile() -> None:
    profiles = InMemoryProfileStore({"home": []})
    service = _service(profiles=profiles, prompter=ScriptedPrompter(confirms=[None]))

    assert not service.delete("home")
    assert "home" in profiles.profiles


def test_set_permanent_prechecks_existing_and_saves_selection() -> None:
    x, y, z = make_record("W1AW"), make_record("N0CALL"), make_record("K0TEST")
    permanent = InMemoryPermanentStore([x])
    prompter = ScriptedPrompter(selections=[[2, 0]])
    service = _service(permanent=permanent, prompter=prompter)

    selected = service.set_permanent([x, y, z], describe=describe_rule)

    items, checked = prompter.multi_select_calls[0]
    assert checked == [True, False, False]
    assert items[1] == '[any] N0CALL - "N0CALL"'
    assert selected == [x, z]
    assert permanent.records == [x, z]


def test_set_permanent_cancel_keeps_existing_set() -> None:
    x = make_record("W1AW")
    permanent = InMemoryPermanentStore([x])
    service = _service(permanent=permanent)

    assert service.set_permanent([x, make_record("N0CALL")], describe=describe_rule) is None
    assert permanent.records == [x]


def test_update_marker_correction_records_best_match() -> None:
    z = make_record("K0TEST")
    marker = InMemoryMarker("home")
    report = build_report(
        live=[make_remote(z)],
        permanent=[],
        profiles={"home": [make_record("N0CALL")], "portable": [z]},
        current="home",
    )

    result = _service(marker=marker).apply_correction(report, CorrectiveAction.UPDATE_MARKER)

    assert result.applied
    assert marker.name == "portable"


def test_save_as_profile_correction_stores_non_permanent_live_rules() -> None:
    x, y = make_record("W1AW"), make_record("N0CALL")
    profiles = InMemoryProfileStore()
    marker = InMemoryMarker()
    report = build_report(
        live=[make_remote(x), make_remote(y)],
        permanent=[x],
        profiles={},
        current=None,
    )
    service = _service(
        profiles=profiles,
        permanent=InMemoryPermanentStore([x]),
        marker=marker,
        prompter=ScriptedPrompter(texts=["contest"]),
    )

    result = service.apply_correction(report, CorrectiveAction.SAVE_AS_PROFILE)

    assert result.applied
    assert result.profile == "contest"
    assert profiles.profiles["contest"] == [y]
    assert marker.name == "contest"


def test_ignore_correction_changes_nothing() -> None:
    marker = InMemoryMarker("home")
    report = build_report(live=[], permanent=[], profiles={}, current="home")

    result = _service(marker=marker).apply_correction(report, CorrectiveAction.IGNORE)

    assert not result.applied
    assert marker.writes == 0
