"""
Unit tests for the person domain model.
"""

import json
from datetime import date

import pytest
from pydantic import ValidationError

from person_registry.domain import (
    AlreadyDead,
    DeathBeforeBirth,
    Person,
    PersonDomainError,
    PersonRecord,
)


class TestPerson:
    """Test Person entity rules."""

    def test_dead_at_records_death(self):
        person = Person("Alice", date(2012, 11, 2))
        person.dead_at(date(2080, 1, 1))

        assert person.is_dead
        assert person.death_date == date(2080, 1, 1)

    def test_dead_at_rejects_second_death(self):
        person = Person("Alice", date(2012, 11, 2), death_date=date(2080, 1, 1))

        with pytest.raises(AlreadyDead) as exc_info:
            person.dead_at(date(2081, 1, 1))

        assert isinstance(exc_info.value, PersonDomainError)
        assert exc_info.value.error_code == "PERSON_ALREADY_DEAD"
        assert person.death_date == date(2080, 1, 1)

    def test_dead_at_rejects_death_before_birth(self):
        person = Person("Alice", date(2012, 11, 2))

        with pytest.raises(DeathBeforeBirth):
            person.dead_at(date(2000, 1, 1))

        assert not person.is_dead

    def test_record_round_trip_keeps_revision(self, sample_record):
        person = Person.from_record(sample_record)
        assert person.to_record(revision=3) == sample_record.model_copy(
            update={"revision": 3}
        )


class TestPersonRecord:
    """Test the persisted record layout."""

    def test_next_revision_bumps_and_applies_changes(self, sample_record):
        updated = sample_record.next_revision(death_date=date(2080, 1, 1))

        assert updated.revision == sample_record.revision + 1
        assert updated.death_date == date(2080, 1, 1)
        assert sample_record.death_date is None

    def test_record_is_immutable(self, sample_record):
        with pytest.raises(ValidationError):
            sample_record.name = "Mallory"

    def test_json_layout(self, sample_record):
        payload = json.loads(sample_record.model_dump_json())

        assert payload == {
            "name": "Alice",
            "birth_date": "2012-11-02",
            "death_date": None,
            "data": "Alice is sender of the message",
            "revision": 0,
        }

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            PersonRecord(name="", birth_date=date(2000, 1, 1))
