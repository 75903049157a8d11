from tracker.models.user import User
from tracker.models.school_class import SchoolClass
from tracker.models.assignment import Assignment, ClassAssignment, AssignmentStatus
from tracker.models.settings import Setting
from tracker.models.audit_log import AuditLog
from tracker.models.reminder_log import ReminderLog

__all__ = [
    'User', 'SchoolClass', 'Assignment', 'ClassAssignment',
    'AssignmentStatus', 'Setting', 'AuditLog', 'ReminderLog'
]
