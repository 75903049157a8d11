"""Unit tests for the grading status tracker."""

from datetime import timedelta

import pytest

from tracker import db
from tracker.models import AuditLog, Assignment
from tracker.utils.assignments import create_assignment
from tracker.utils.errors import NotFound
from tracker.utils.grading import set_graded
from tracker.utils.helpers import school_now


@pytest.fixture
def assignment(app, teacher, make_class):
    school_class = make_class('DISCIPLINE')
    return create_assignment('Math', 'Fractions', 'task', [school_class.id], teacher.id)


class TestSetGraded:

    def test_marking_graded_sets_time_and_actor(self, app, assignment, admin):
        before = school_now()

        status = set_graded(assignment.id, True, admin.id)

        assert status.is_graded is True
        assert status.grade_input_by == admin.id
        assert before <= status.graded_at <= school_now() + timedelta(seconds=1)
        assert db.session.get(Assignment, assignment.id).status == 'graded'

    def test_unmarking_clears_time_and_actor(self, app, assignment, teacher):
        set_graded(assignment.id, True, teacher.id)

        status = set_graded(assignment.id, False, teacher.id)

        assert status.is_graded is False
        assert status.graded_at is None
        assert status.grade_input_by is None
        assert db.session.get(Assignment, assignment.id).status == 'pending'

    def test_repeated_call_keeps_state_and_audits_twice(self, app, assignment, teacher):
        set_graded(assignment.id, True, teacher.id)
        status = set_graded(assignment.id, True, teacher.id)

        assert status.is_graded is True
        assert status.grade_input_by == teacher.id
        assert AuditLog.query.filter_by(action='update_grade_status').count() == 2

    def test_audit_records_previous_and_new_status(self, app, assignment, teacher):
        set_graded(assignment.id, True, teacher.id)

        entry = AuditLog.query.filter_by(action='update_grade_status').one().to_dict()

        assert entry['table_name'] == 'assignment_statuses'
        assert entry['record_id'] == str(assignment.id)
        assert entry['old_value']['is_graded'] is False
        assert entry['old_value']['graded_at'] is None
        assert entry['new_value']['is_graded'] is True
        assert entry['new_value']['grade_input_by'] == teacher.id

    def test_unknown_assignment(self, app, teacher):
        with pytest.raises(NotFound):
            set_graded(12345, True, teacher.id)

        assert AuditLog.query.filter_by(action='update_grade_status').count() == 0
