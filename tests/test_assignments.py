"""
Tests for single and bulk mentor/mentee assignment
"""
import asyncio

import pytest
from sqlalchemy import func, select

from mentorfeed.app.core.errors import Forbidden, InvalidAssignee, NotFound
from mentorfeed.app.schemas.assignment import BulkAssignRow
from mentorfeed.app.services import assignments
from mentorfeed.db.models import MenteeAssignment


@pytest.fixture
def setup(make_user, make_form, make_event):
    organizer = make_user('organizer')
    mentor = make_user('mentor')
    mentee = make_user('mentee')
    event = make_event(organizer, make_form(organizer))
    return organizer, mentor, mentee, event


def _count(db):
    return db.scalar(select(func.count()).select_from(MenteeAssignment))


class TestAssign:
    def test_assign_twice_keeps_one_row(self, db, setup, principal_for):
        organizer, mentor, mentee, event = setup
        first = assignments.assign(db, principal_for(organizer), mentee.user_id, mentor.user_id, event.event_id)
        second = assignments.assign(db, principal_for(organizer), mentee.user_id, mentor.user_id, event.event_id)
        assert first.assignment_id == second.assignment_id
        assert _count(db) == 1

    def test_roles_are_checked(self, db, setup, principal_for):
        organizer, mentor, mentee, event = setup
        with pytest.raises(InvalidAssignee) as exc:
            assignments.assign(db, principal_for(organizer), mentor.user_id, mentor.user_id, event.event_id)
        assert exc.value.field == 'mentee_id'
        with pytest.raises(InvalidAssignee) as exc:
            assignments.assign(db, principal_for(organizer), mentee.user_id, mentee.user_id, event.event_id)
        assert exc.value.field == 'mentor_id'
        assert _count(db) == 0

    def test_other_organizer_is_forbidden(self, db, setup, make_user, principal_for):
        _, mentor, mentee, event = setup
        stranger = make_user('organizer')
        with pytest.raises(Forbidden):
            assignments.assign(db, principal_for(stranger), mentee.user_id, mentor.user_id, event.event_id)

    def test_admin_may_assign_on_any_event(self, db, setup, make_user, principal_for):
        _, mentor, mentee, event = setup
        admin = make_user('admin')
        assignments.assign(db, principal_for(admin), mentee.user_id, mentor.user_id, event.event_id)
        assert _count(db) == 1

    def test_unknown_event(self, db, setup, principal_for):
        organizer, mentor, mentee, _ = setup
        with pytest.raises(NotFound):
            assignments.assign(db, principal_for(organizer), mentee.user_id, mentor.user_id, 'missing')

    def test_remove_assignment(self, db, setup, principal_for):
        organizer, mentor, mentee, event = setup
        a = assignments.assign(db, principal_for(organizer), mentee.user_id, mentor.user_id, event.event_id)
        assignments.remove_assignment(db, principal_for(organizer), a.assignment_id)
        assert _count(db) == 0

    def test_mentor_sees_own_mentees(self, db, setup, make_user, principal_for):
        organizer, mentor, mentee, event = setup
        other_mentor = make_user('mentor')
        assignments.assign(db, principal_for(organizer), mentee.user_id, mentor.user_id, event.event_id)
        assignments.assign(db, principal_for(organizer), mentee.user_id, other_mentor.user_id, event.event_id)

        rows = assignments.list_mentees_for_mentor(db, principal_for(mentor))
        assert [r.mentee.user_id for r in rows] == [mentee.user_id]
        assert rows[0].event_name == event.name
        assert assignments.list_mentees_for_mentor(db, principal_for(mentor), event_id='other') == []


class TestBulkAssign:
    def _run(self, db, principal, event, rows, notifier):
        rows = [BulkAssignRow(mentee_email=a, mentor_email=b) for a, b in rows]
        return asyncio.run(assignments.bulk_assign(db, principal, event.event_id, rows, notifier))

    def test_mixed_outcomes_are_reported_per_row(self, db, setup, make_user, principal_for, notifier):
        organizer, mentor, mentee, event = setup
        plain_user = make_user('user')

        out = self._run(db, principal_for(organizer), event, [
            (mentee.email, mentor.email),
            ('new.mentee@example.com', mentor.email),
            (mentee.email, 'new.mentor@example.com'),
            ('nobody@example.com', 'nobody.either@example.com'),
            (plain_user.email, mentor.email),
            (mentee.email, mentor.email),
        ], notifier)

        assert [r.status for r in out.results] == [
            'created', 'invited_mentee', 'invited_mentor', 'invited_mentee', 'created',
        ]
        assert [e.mentee_email for e in out.errors] == [plain_user.email]
        assert out.errors[0].status == 'error'
        assert out.total_processed == 6
        assert (out.success_count, out.error_count) == (5, 1)
        assert _count(db) == 1

        assert notifier.kinds_for('new.mentee@example.com') == ['assignment_invitation']
        assert notifier.kinds_for('new.mentor@example.com') == ['assignment_invitation']
        assert notifier.kinds_for('nobody.either@example.com') == []
        assert notifier.kinds_for(mentee.email) == ['assignment_notification', 'assignment_notification']

    def test_rows_committed_before_a_failing_row_survive(self, db, setup, make_user, principal_for, notifier):
        organizer, mentor, mentee, event = setup
        second_mentee = make_user('mentee')
        out = self._run(db, principal_for(organizer), event, [
            (mentee.email, mentor.email),
            (mentor.email, mentor.email),
            (second_mentee.email, mentor.email),
        ], notifier)
        assert out.success_count == 2
        assert out.error_count == 1
        assert _count(db) == 2

    def test_notification_failure_is_a_warning(self, db, setup, principal_for, notifier):
        organizer, mentor, mentee, event = setup
        notifier.fail_for.add(mentor.email)
        out = self._run(db, principal_for(organizer), event, [(mentee.email, mentor.email)], notifier)
        assert out.results[0].status == 'created'
        assert out.results[0].warning
        assert out.error_count == 0
        assert _count(db) == 1

    def test_rerun_resends_invitation(self, db, setup, principal_for, notifier):
        organizer, mentor, _, event = setup
        rows = [('later@example.com', mentor.email)]
        self._run(db, principal_for(organizer), event, rows, notifier)
        self._run(db, principal_for(organizer), event, rows, notifier)
        assert notifier.kinds_for('later@example.com') == ['assignment_invitation', 'assignment_invitation']

    def test_other_organizer_is_forbidden(self, db, setup, make_user, principal_for, notifier):
        _, mentor, mentee, event = setup
        with pytest.raises(Forbidden):
            self._run(db, principal_for(make_user('organizer')), event, [(mentee.email, mentor.email)], notifier)
