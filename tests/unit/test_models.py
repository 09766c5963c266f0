"""
Unit tests for outage_common.models.

Tests the Outage model: construction and normalization, the stage state
machine, derived predicates, durations and placeholder rendering.
"""

import json
from types import SimpleNamespace

import pytest

from outage_common import clock
from outage_common.directory import StaticDirectory, UserAccount
from outage_common.exceptions import InvalidInputError, OutageStateError
from outage_common.formatting import Formatter
from outage_common.models import (
    OUTAGE_FIELDS,
    Outage,
    OutageDefaults,
    Stage,
    create_default_outage,
)


class FakeFormatter(Formatter):
    """Formatter with predictable output for placeholder tests."""

    def format_datetime(self, timestamp: int) -> str:
        return f"<t{timestamp}>"

    def format_duration(self, seconds: int) -> str:
        return f"<{seconds}s>"


@pytest.fixture
def outage():
    """Outage warning at 0, starting at 100, stopping at 200."""
    return Outage(id=1, warntime=0, starttime=100, stoptime=200)


class TestConstruction:
    """Test suite for building outages."""

    def test_empty_outage_is_all_none(self):
        """Test that an outage without data has every field set to None."""
        outage = Outage()

        assert all(value is None for value in outage.to_dict().values())

    def test_from_dict_none(self):
        """Test that from_dict(None) gives an empty outage."""
        assert Outage.from_dict(None) == Outage()

    def test_from_dict_copies_known_fields(self):
        """Test that known fields are copied and unknown ones ignored."""
        outage = Outage.from_dict(
            {"id": 5, "title": "Upgrade", "starttime": 100, "colour": "red"}
        )

        assert outage.id == 5
        assert outage.title == "Upgrade"
        assert outage.starttime == 100
        assert not hasattr(outage, "colour")

    def test_from_dict_accepts_object(self):
        """Test that an object with attributes is treated as a data bag."""
        bag = SimpleNamespace(id="7", stoptime="300", unrelated=True)

        outage = Outage.from_dict(bag)

        assert outage.id == 7
        assert outage.stoptime == 300

    @pytest.mark.parametrize("data", [5, "outage", [1, 2, 3], 4.5, True])
    def test_from_dict_rejects_non_mapping(self, data):
        """Test that scalars and lists are rejected."""
        with pytest.raises(InvalidInputError):
            Outage.from_dict(data)

    def test_int_fields_are_normalized(self):
        """Test that integer-like strings and floats become ints."""
        outage = Outage(
            id="1",
            starttime="100",
            stoptime=200.0,
            warntime="50",
            finished="150",
            createdby="2",
            modifiedby="3",
            lastmodified="999",
        )

        assert outage.id == 1
        assert outage.starttime == 100
        assert outage.stoptime == 200
        assert outage.warntime == 50
        assert outage.finished == 150
        assert outage.createdby == 2
        assert outage.modifiedby == 3
        assert outage.lastmodified == 999
        assert isinstance(outage.stoptime, int)

    def test_none_fields_stay_none(self):
        """Test that normalization preserves None."""
        outage = Outage(starttime=100, finished=None, autostart=None)

        assert outage.finished is None
        assert outage.autostart is None

    @pytest.mark.parametrize("value", ["tomorrow", float("inf"), float("nan"), [100]])
    def test_invalid_int_field_raises(self, value):
        """Test that a value which cannot be an int is rejected."""
        with pytest.raises(InvalidInputError, match="starttime"):
            Outage(starttime=value)

    def test_infinity_from_json_raises(self):
        """Test that a JSON Infinity literal is rejected, not overflowed."""
        with pytest.raises(InvalidInputError, match="starttime"):
            Outage.from_dict(json.loads('{"starttime": Infinity}'))

    @pytest.mark.parametrize(
        "value,expected",
        [(1, True), (0, False), ("1", True), ("0", False), ("", False),
         ("false", False), (True, True), (False, False)],
    )
    def test_autostart_is_normalized_to_bool(self, value, expected):
        """Test that autostart flags from storage become real booleans."""
        assert Outage(autostart=value).autostart is expected

    def test_to_dict_has_every_field(self):
        """Test that to_dict returns the full wire contract."""
        outage = Outage(id=3, title="Down")
        result = outage.to_dict()

        assert tuple(result) == OUTAGE_FIELDS
        assert result["id"] == 3
        assert result["title"] == "Down"
        assert result["finished"] is None

    def test_clone_drops_id(self, outage):
        """Test that a clone is a copy without its id."""
        outage.title = "Upgrade"
        copy = outage.clone()

        assert copy.id is None
        assert copy.title == "Upgrade"
        assert copy.starttime == outage.starttime
        assert outage.id == 1


class TestStage:
    """Test suite for get_stage and its evaluation order."""

    @pytest.mark.parametrize(
        "time,expected",
        [
            (50, Stage.WARNING),
            (99, Stage.WARNING),
            (100, Stage.ONGOING),
            (150, Stage.ONGOING),
            (199, Stage.ONGOING),
            (200, Stage.STOPPED),
            (250, Stage.STOPPED),
        ],
    )
    def test_stages_without_finish(self, outage, time, expected):
        """Test the stage at each point of an unfinished outage."""
        assert outage.get_stage(time) == expected

    def test_waiting_before_warning(self):
        """Test that the outage is waiting before its warning period."""
        outage = Outage(warntime=10, starttime=100, stoptime=200)

        assert outage.get_stage(5) == Stage.WAITING
        assert outage.get_stage(10) == Stage.WARNING

    def test_finished_takes_precedence_before_stop(self, outage):
        """Test that an early finish wins over the planned stop time."""
        outage.finished = 120

        assert outage.get_stage(119) == Stage.ONGOING
        assert outage.get_stage(120) == Stage.FINISHED
        assert outage.get_stage(130) == Stage.FINISHED
        assert outage.get_stage(500) == Stage.FINISHED

    def test_finished_after_stop_time(self, outage):
        """Test that an outage finished late reports stopped until finished."""
        outage.finished = 300

        assert outage.get_stage(250) == Stage.STOPPED
        assert outage.get_stage(300) == Stage.FINISHED

    def test_finished_before_warning(self):
        """Test that a finish marker wins even before the warning period."""
        outage = Outage(warntime=100, starttime=200, stoptime=300, finished=50)

        assert outage.get_stage(60) == Stage.FINISHED
        assert outage.get_stage(40) == Stage.WAITING

    def test_stale_outage_reports_stopped(self):
        """Test that stop time wins over the warning window when misordered."""
        outage = Outage(warntime=500, starttime=600, stoptime=100)

        assert outage.get_stage(200) == Stage.STOPPED

    @pytest.mark.parametrize("time", ["not-a-time", -5, 0, 12.5, None, True])
    def test_invalid_time_raises(self, outage, time):
        """Test that the reference time must be a positive int."""
        with pytest.raises(InvalidInputError):
            outage.get_stage(time)

    def test_incomplete_schedule_raises(self):
        """Test that an outage without timestamps has no stage."""
        with pytest.raises(InvalidInputError, match="stoptime"):
            Outage(starttime=100, warntime=50).get_stage(10)

    def test_stage_values(self):
        """Test the string value of each stage."""
        assert [stage.value for stage in Stage] == [
            "waiting", "warning", "ongoing", "finished", "stopped"
        ]


class TestPredicates:
    """Test suite for is_active, is_ongoing and has_ended."""

    @pytest.mark.parametrize("time", [5, 50, 150, 199, 200, 250])
    def test_predicates_follow_stage(self, time):
        """Test that each predicate matches the stage it summarizes."""
        outage = Outage(warntime=10, starttime=100, stoptime=200)
        stage = outage.get_stage(time)

        assert outage.is_active(time) == (stage in (Stage.WARNING, Stage.ONGOING))
        assert outage.is_ongoing(time) == (stage == Stage.ONGOING)
        assert outage.has_ended(time) == (stage in (Stage.FINISHED, Stage.STOPPED))

    def test_warning_is_active_but_not_ongoing(self, outage):
        assert outage.is_active(50)
        assert not outage.is_ongoing(50)
        assert not outage.has_ended(50)

    def test_finished_has_ended(self, outage):
        outage.finished = 120

        assert outage.has_ended(130)
        assert not outage.is_active(130)

    def test_predicates_validate_time(self, outage):
        with pytest.raises(InvalidInputError):
            outage.is_active(-1)


class TestDurations:
    """Test suite for duration calculations."""

    def test_duration_planned(self, outage):
        assert outage.duration_planned() == 100

    def test_warning_duration(self, outage):
        assert outage.warning_duration() == 100

    def test_duration_actual_none_until_finished(self, outage):
        assert outage.duration_actual() is None

        outage.finished = 180
        assert outage.duration_actual() == 80

    def test_duration_actual_can_be_negative(self, outage):
        """Test that finishing before the start is not guarded against."""
        outage.finished = 60

        assert outage.duration_actual() == -40

    def test_misordered_schedule_gives_negative_duration(self):
        outage = Outage(warntime=300, starttime=200, stoptime=100)

        assert outage.duration_planned() == -100
        assert outage.warning_duration() == -100


class TestFinish:
    """Test suite for marking outages as finished."""

    def test_finish_ongoing_outage(self, outage):
        outage.finish(150)

        assert outage.finished == 150
        assert outage.get_stage(150) == Stage.FINISHED
        assert outage.duration_actual() == 50

    @pytest.mark.parametrize("time", [50, 200, 300])
    def test_finish_requires_ongoing(self, outage, time):
        """Test that only an ongoing outage can be finished."""
        with pytest.raises(OutageStateError):
            outage.finish(time)
        assert outage.finished is None

    def test_finish_twice_raises(self, outage):
        outage.finish(150)

        with pytest.raises(OutageStateError):
            outage.finish(160)
        assert outage.finished == 150

    def test_finish_is_final_even_before_marker(self, outage):
        """Test that a finish marker in the future cannot be moved."""
        outage.finished = 180

        with pytest.raises(OutageStateError, match="already"):
            outage.finish(150)
        assert outage.finished == 180

    def test_finish_validates_time(self, outage):
        with pytest.raises(InvalidInputError):
            outage.finish(0)


class TestRendering:
    """Test suite for placeholder substitution."""

    def test_title_placeholders(self):
        """Test that every placeholder in the title is replaced."""
        outage = Outage(
            starttime=1000,
            stoptime=4600,
            title="Down {{start}} to {{stop}} ({{duration}})",
        )

        assert outage.get_title(FakeFormatter()) == "Down <t1000> to <t4600> (<3600s>)"

    def test_repeated_placeholders(self):
        outage = Outage(starttime=1000, stoptime=4600, description="{{start}}, {{start}}")

        assert outage.get_description(FakeFormatter()) == "<t1000>, <t1000>"

    def test_text_without_placeholders_is_unchanged(self):
        """Test that plain text renders as-is, even with no schedule."""
        outage = Outage(title="Maintenance {{tonight}} {start}")

        assert outage.get_title(FakeFormatter()) == "Maintenance {{tonight}} {start}"

    def test_none_text_renders_empty(self):
        assert Outage().get_description(FakeFormatter()) == ""

    def test_default_formatter(self):
        """Test that the default formatter is used when none is given."""
        outage = Outage(starttime=1000, stoptime=4600, title="For {{duration}}")

        assert outage.get_title() == "For 1 hour"

    def test_rendering_does_not_change_fields(self):
        outage = Outage(starttime=1000, stoptime=4600, title="At {{start}}")
        outage.get_title(FakeFormatter())

        assert outage.title == "At {{start}}"


class TestSiteadminEmails:
    """Test suite for get_siteadmin_emails."""

    def test_joins_admin_emails(self, outage):
        directory = StaticDirectory(
            [
                UserAccount(id=2, email="admin@example.com", is_admin=True),
                UserAccount(id=3, email="user@example.com"),
                UserAccount(id=4, email="ops@example.com", is_admin=True),
            ]
        )

        assert outage.get_siteadmin_emails(directory) == "admin@example.com,ops@example.com"

    def test_no_admins(self, outage):
        assert outage.get_siteadmin_emails(StaticDirectory()) == ""


class TestDefaultOutage:
    """Test suite for create_default_outage."""

    def test_schedule_from_defaults(self):
        defaults = OutageDefaults(
            autostart=True,
            default_warning_duration=600,
            default_duration=1800,
            default_title="Down",
            default_description="Details",
            mailinglist="2,3",
        )

        outage = create_default_outage(defaults, 10_000)

        assert outage.id is None
        assert outage.autostart is True
        assert outage.starttime == 10_000
        assert outage.stoptime == 11_800
        assert outage.warntime == 9_400
        assert outage.title == "Down"
        assert outage.description == "Details"
        assert outage.outagemailinglist == "2,3"
        assert outage.get_stage(10_000) == Stage.ONGOING

    def test_default_values(self):
        outage = create_default_outage(OutageDefaults(), 100_000)

        assert outage.warning_duration() == 3600
        assert outage.duration_planned() == 7200
        assert outage.autostart is False
        assert "{{start}}" in outage.title

    def test_invalid_time_raises(self):
        with pytest.raises(InvalidInputError):
            create_default_outage(OutageDefaults(), -1)


class TestClock:
    """Test suite for the wall-clock helper used by entry points."""

    def test_current_time_is_whole_seconds(self, monkeypatch):
        monkeypatch.setattr(clock.time, "time", lambda: 1_700_000_000.75)

        assert clock.current_time() == 1_700_000_000

    def test_current_time_is_a_valid_reference(self, outage):
        assert outage.get_stage(clock.current_time()) == Stage.STOPPED
