"""Tests for Letter records, LetterQuery filters and RegisterState parsing."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from regctl.domain.errors import RegisterValidationError
from regctl.domain.letters import Letter, LetterQuery, RegisterState, check_consistency
from regctl.domain.types import Classification, LetterStatus


def _record(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": "a1",
        "classification": "OUTGOING",
        "letter_date": "2024-03-15",
        "year": 2024,
        "register_no": 1,
        "register_display": "OUT/2024/0001",
        "subject": "Budget report",
        "party": "Finance Office",
        "status": "ACTIVE",
        "created_at": "2024-03-15T08:00:00+00:00",
        "updated_at": "2024-03-15T08:00:00+00:00",
    }
    record.update(overrides)
    return record


def _letter(**overrides: Any) -> Letter:
    return Letter.model_validate(_record(**overrides))


class TestLetter:
    def test_round_trips_record_exactly(self) -> None:
        record = _record()
        assert Letter.model_validate(record).to_record() == record

    def test_counter_key(self) -> None:
        assert _letter().counter_key == "OUTGOING:2024"

    def test_with_status_only_moves_status_and_updated_at(self) -> None:
        letter = _letter()
        voided = letter.with_status(LetterStatus.VOID, updated_at="2024-04-01T00:00:00+00:00")
        assert voided.status == LetterStatus.VOID
        assert voided.updated_at == "2024-04-01T00:00:00+00:00"
        assert voided.register_display == letter.register_display
        assert voided.created_at == letter.created_at
        assert letter.is_active
        assert not voided.is_active

    def test_frozen(self) -> None:
        letter = _letter()
        with pytest.raises(ValidationError):
            letter.subject = "changed"  # type: ignore[misc]

    def test_register_no_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            _letter(register_no=0)

    def test_whitespace_subject_rejected(self) -> None:
        with pytest.raises(ValidationError, match="subject must not be blank"):
            _letter(subject="   \t")

    def test_subject_kept_as_given(self) -> None:
        assert _letter(subject=" Budget report").subject == " Budget report"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"year": "2024"},
            {"register_no": "1"},
            {"year": 2024.0},
            {"register_no": True},
            {"subject": 42},
        ],
    )
    def test_numbers_and_text_keep_their_json_types(self, overrides: dict[str, Any]) -> None:
        with pytest.raises(ValidationError):
            _letter(**overrides)

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValidationError, match="archived_by"):
            _letter(archived_by="clerk")

    def test_party_defaults_to_empty(self) -> None:
        record = _record()
        del record["party"]
        assert Letter.model_validate(record).party == ""


class TestLetterQuery:
    def test_empty_query_matches_everything(self) -> None:
        assert LetterQuery().matches(_letter())

    def test_classification_filter(self) -> None:
        query = LetterQuery(classification=Classification.CERTIFICATE)
        assert not query.matches(_letter())
        assert query.matches(_letter(classification="CERTIFICATE"))

    def test_year_filter(self) -> None:
        assert LetterQuery(year=2024).matches(_letter())
        assert not LetterQuery(year=2023).matches(_letter())

    def test_status_filter(self) -> None:
        assert LetterQuery(status=LetterStatus.VOID).matches(_letter(status="VOID"))
        assert not LetterQuery(status=LetterStatus.VOID).matches(_letter())

    @pytest.mark.parametrize(
        "needle",
        ["out/2024/0001", "outgoing letter", "BUDGET", "finance", "2024-03", "active"],
    )
    def test_search_covers_every_text_field(self, needle: str) -> None:
        assert LetterQuery(search=needle).matches(_letter())

    def test_search_miss(self) -> None:
        assert not LetterQuery(search="domicile").matches(_letter())

    def test_blank_search_is_ignored(self) -> None:
        assert LetterQuery(search="   ").matches(_letter())

    def test_filters_combine(self) -> None:
        query = LetterQuery(year=2024, search="domicile")
        assert not query.matches(_letter())

    def test_callable(self) -> None:
        assert LetterQuery(year=2024)(_letter())

    def test_to_dict_lists_applied_filters_only(self) -> None:
        query = LetterQuery(classification=Classification.OUTGOING, search="budget")
        assert query.to_dict() == {"classification": "OUTGOING", "search": "budget"}
        assert LetterQuery().to_dict() == {}


class TestRegisterStateParse:
    def test_valid_payload(self) -> None:
        state = RegisterState.parse({"counters": {"OUTGOING:2024": 1}, "letters": [_record()]})
        assert state.counters == {"OUTGOING:2024": 1}
        assert [letter.id for letter in state.letters] == ["a1"]

    def test_payload_round_trips(self) -> None:
        payload = {"counters": {"OUTGOING:2024": 1}, "letters": [_record()]}
        assert RegisterState.parse(payload).to_payload() == payload

    def test_empty_collections_accepted(self) -> None:
        state = RegisterState.parse({"counters": {}, "letters": []})
        assert state == RegisterState.empty()

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            "counters",
            None,
            {"letters": []},
            {"counters": {}},
        ],
    )
    def test_structural_rejections(self, payload: Any) -> None:
        with pytest.raises(RegisterValidationError):
            RegisterState.parse(payload)

    def test_missing_counters_named_in_message(self) -> None:
        with pytest.raises(RegisterValidationError, match="counters"):
            RegisterState.parse({"letters": []})

    @pytest.mark.parametrize(
        "overrides",
        [{"subject": "  "}, {"year": "2024"}, {"imported_from": "legacy"}],
    )
    def test_imported_record_that_would_not_export_back_is_rejected(
        self, overrides: dict[str, Any]
    ) -> None:
        payload = {"counters": {"OUTGOING:2024": 1}, "letters": [_record(**overrides)]}
        with pytest.raises(RegisterValidationError, match="Letter record 0 is invalid"):
            RegisterState.parse(payload)

    def test_counters_must_be_mapping(self) -> None:
        with pytest.raises(RegisterValidationError, match="'counters' must be a mapping"):
            RegisterState.parse({"counters": [], "letters": []})

    def test_letters_must_be_list(self) -> None:
        with pytest.raises(RegisterValidationError, match="'letters' must be a list"):
            RegisterState.parse({"counters": {}, "letters": {}})

    @pytest.mark.parametrize("value", [-1, "3", 1.5, True])
    def test_counter_values_must_be_non_negative_ints(self, value: Any) -> None:
        with pytest.raises(RegisterValidationError, match="non-negative integer"):
            RegisterState.parse({"counters": {"OUTGOING:2024": value}, "letters": []})

    def test_counter_keys_validated(self) -> None:
        with pytest.raises(RegisterValidationError, match="counter key"):
            RegisterState.parse({"counters": {"OUT-2024": 1}, "letters": []})

    def test_invalid_letter_record(self) -> None:
        bad = _record(subject="")
        with pytest.raises(RegisterValidationError, match="Letter record 0 is invalid"):
            RegisterState.parse({"counters": {"OUTGOING:2024": 1}, "letters": [bad]})

    def test_duplicate_ids_rejected(self) -> None:
        payload = {
            "counters": {"OUTGOING:2024": 2},
            "letters": [_record(), _record(register_no=2, register_display="OUT/2024/0002")],
        }
        with pytest.raises(RegisterValidationError, match="Duplicate letter ID"):
            RegisterState.parse(payload)


class TestCheckConsistency:
    def test_consistent_state(self) -> None:
        state = RegisterState.parse({"counters": {"OUTGOING:2024": 5}, "letters": [_record()]})
        assert check_consistency(state) == []

    def test_letter_above_counter(self) -> None:
        state = RegisterState.parse({"counters": {}, "letters": [_record()]})
        issues = check_consistency(state)
        assert len(issues) == 1
        assert "OUT/2024/0001" in issues[0]
        assert "OUTGOING:2024=0" in issues[0]

    def test_repeated_number(self) -> None:
        state = RegisterState.parse(
            {
                "counters": {"OUTGOING:2024": 1},
                "letters": [_record(), _record(id="a2")],
            }
        )
        issues = check_consistency(state)
        assert issues == ["Number 1 is used 2 times under OUTGOING:2024"]
