"""Unit tests for the weekly quota engine."""

from datetime import datetime, date

import pytest
from sqlalchemy.exc import SQLAlchemyError

from tracker import db
from tracker.models import Assignment, ClassAssignment, AssignmentStatus, Setting
from tracker.utils import quota, settings
from tracker.utils.assignments import create_assignment
from tracker.utils.errors import QuotaExceeded


def add_assignment(teacher, school_class, week_number, year):
    assignment = Assignment(
        subject='History',
        learning_goal='Timeline of events',
        type='task',
        week_number=week_number,
        year=year,
        assigned_date=date(year, 1, 1),
        teacher_id=teacher.id
    )
    db.session.add(assignment)
    db.session.flush()
    db.session.add(ClassAssignment(class_id=school_class.id, assignment_id=assignment.id))
    db.session.add(AssignmentStatus(assignment_id=assignment.id))
    db.session.commit()
    return assignment


class TestWeekBucket:
    """Tests for ISO week bucketing."""

    def test_uses_iso_week_and_year(self):
        assert quota.current_week_bucket(datetime(2025, 3, 12, 10, 0)) == (11, 2025)

    def test_week_starts_on_monday(self):
        sunday = datetime(2025, 3, 16, 23, 59)
        monday = datetime(2025, 3, 17, 0, 0)
        assert quota.current_week_bucket(sunday) == (11, 2025)
        assert quota.current_week_bucket(monday) == (12, 2025)

    def test_year_boundary_uses_iso_year(self):
        # 29 December 2025 belongs to ISO week 1 of 2026
        assert quota.current_week_bucket(datetime(2025, 12, 29, 8, 0)) == (1, 2026)
        # 1 January 2027 still belongs to ISO week 53 of 2026
        assert quota.current_week_bucket(datetime(2027, 1, 1, 8, 0)) == (53, 2026)

    def test_defaults_to_now(self, app):
        week_number, year = quota.current_week_bucket()
        assert 1 <= week_number <= 53
        assert year >= 2024


class TestGetLimit:
    """Tests for the configurable limit lookup."""

    def test_seeded_default(self, app):
        assert quota.get_limit() == quota.DEFAULT_MAX_ASSIGNMENTS_PER_WEEK == 2

    def test_reads_stored_value(self, app):
        settings.upsert(settings.MAX_ASSIGNMENTS_SETTING, '5', None, None)
        assert quota.get_limit() == 5

    def test_missing_setting_falls_back(self, app):
        db.session.delete(db.session.get(Setting, settings.MAX_ASSIGNMENTS_SETTING))
        db.session.commit()
        assert quota.get_limit() == 2

    @pytest.mark.parametrize('raw', ['abc', '', '0', '-3', '2.5'])
    def test_unusable_value_falls_back(self, app, raw):
        setting = db.session.get(Setting, settings.MAX_ASSIGNMENTS_SETTING)
        setting.value = raw
        db.session.commit()
        assert quota.get_limit() == 2

    def test_storage_error_falls_back(self, app, monkeypatch):
        def broken(key):
            raise SQLAlchemyError('database is locked')

        monkeypatch.setattr(quota.settings, 'get_value', broken)
        assert quota.get_limit() == 2

    def test_read_fresh_every_call(self, app):
        assert quota.get_limit() == 2
        settings.upsert(settings.MAX_ASSIGNMENTS_SETTING, '3', None, None)
        assert quota.get_limit() == 3


class TestCounting:
    """Tests for per-class, per-teacher counting."""

    def test_counts_only_matching_bucket_teacher_and_class(self, app, make_user, make_class):
        teacher = make_user('teacher')
        other_teacher = make_user('teacher')
        class_a = make_class('A')
        class_b = make_class('B')

        add_assignment(teacher, class_a, 10, 2025)
        add_assignment(teacher, class_a, 10, 2025)
        add_assignment(teacher, class_a, 11, 2025)
        add_assignment(teacher, class_a, 10, 2024)
        add_assignment(teacher, class_b, 10, 2025)
        add_assignment(other_teacher, class_a, 10, 2025)

        assert quota.count_for_class_and_teacher(class_a.id, 10, 2025, teacher.id) == 2
        assert quota.count_for_class_and_teacher(class_b.id, 10, 2025, teacher.id) == 1
        assert quota.count_for_class_and_teacher(class_a.id, 10, 2025, other_teacher.id) == 1
        assert quota.count_for_class_and_teacher(class_b.id, 12, 2025, teacher.id) == 0


class TestCheckQuota:
    """Tests for the all-or-nothing quota gate."""

    def test_passes_below_limit(self, app, teacher, make_class):
        school_class = make_class('DISCIPLINE')
        week_number, year = quota.current_week_bucket()
        add_assignment(teacher, school_class, week_number, year)

        quota.check_quota([school_class.id], teacher.id)

    def test_fails_at_limit_with_class_name(self, app, teacher, make_class):
        school_class = make_class('DISCIPLINE')
        week_number, year = quota.current_week_bucket()
        add_assignment(teacher, school_class, week_number, year)
        add_assignment(teacher, school_class, week_number, year)

        with pytest.raises(QuotaExceeded) as exc_info:
            quota.check_quota([school_class.id], teacher.id)

        assert exc_info.value.class_name == 'DISCIPLINE'
        assert exc_info.value.limit == 2
        assert exc_info.value.status_code == 400

    def test_stops_at_first_full_class(self, app, teacher, make_class):
        free = make_class('FREE')
        full_first = make_class('FULL1')
        full_second = make_class('FULL2')
        week_number, year = quota.current_week_bucket()
        for school_class in (full_first, full_second):
            add_assignment(teacher, school_class, week_number, year)
            add_assignment(teacher, school_class, week_number, year)

        with pytest.raises(QuotaExceeded) as exc_info:
            quota.check_quota([free.id, full_second.id, full_first.id], teacher.id)

        assert exc_info.value.class_name == 'FULL2'

    def test_previous_week_does_not_count(self, app, teacher, make_class):
        school_class = make_class('RESPECT')
        week_number, year = quota.current_week_bucket()
        previous_week = week_number - 1 if week_number > 1 else 52
        previous_year = year if week_number > 1 else year - 1
        add_assignment(teacher, school_class, previous_week, previous_year)
        add_assignment(teacher, school_class, previous_week, previous_year)

        quota.check_quota([school_class.id], teacher.id)

    def test_other_teachers_do_not_count(self, app, teacher, make_user, make_class):
        school_class = make_class('RESPECT')
        colleague = make_user('teacher')
        week_number, year = quota.current_week_bucket()
        add_assignment(colleague, school_class, week_number, year)
        add_assignment(colleague, school_class, week_number, year)

        quota.check_quota([school_class.id], teacher.id)


class TestClassQuotas:
    """Tests for the teacher dashboard quota summary."""

    def test_full_class_reports_zero_remaining(self, app, teacher, make_class):
        school_class = make_class('HONESTY', teacher=teacher)
        for _ in range(2):
            create_assignment('Math', 'Fractions', 'task', [school_class.id], teacher.id)

        [summary] = quota.class_quotas(teacher.id)

        assert summary['class']['id'] == school_class.id
        assert summary['current_count'] == 2
        assert summary['remaining'] == 0
        assert summary['quota_percentage'] == 100

    def test_over_quota_reports_negative_remaining(self, app, teacher, make_class):
        school_class = make_class('HONESTY', teacher=teacher)
        week_number, year = quota.current_week_bucket()
        for _ in range(3):
            add_assignment(teacher, school_class, week_number, year)

        [summary] = quota.class_quotas(teacher.id)

        assert summary['remaining'] == -1
        assert summary['quota_percentage'] == 150

    def test_only_owned_classes_listed(self, app, teacher, make_user, make_class):
        make_class('MINE', grade=8, teacher=teacher)
        make_class('ALSO MINE', grade=7, teacher=teacher)
        make_class('NOT MINE', teacher=make_user('teacher'))

        summaries = quota.class_quotas(teacher.id)

        assert [s['class']['name'] for s in summaries] == ['ALSO MINE', 'MINE']
        assert all(s['current_count'] == 0 and s['remaining'] == 2 for s in summaries)
