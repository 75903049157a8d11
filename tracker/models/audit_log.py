from tracker import db
from tracker.utils.helpers import school_now, isoformat, from_json

AUDIT_ACTIONS = frozenset({
    'create_assignment',
    'update_assignment',
    'delete_assignment',
    'create_class',
    'update_class',
    'delete_class',
    'update_settings',
    'send_reminder',
    'update_grade_status',
    'user_login',
    'user_logout',
    'user_registration',
})

class AuditLog(db.Model):
    __tablename__ = 'audit_logs'
    
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    action = db.Column(db.String(50), nullable=False, index=True)
    table_name = db.Column(db.String(100))
    record_id = db.Column(db.String(100))
    old_value = db.Column(db.Text)
    new_value = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=school_now, index=True)
    
    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'action': self.action,
            'table_name': self.table_name,
            'record_id': self.record_id,
            'old_value': from_json(self.old_value),
            'new_value': from_json(self.new_value),
            'created_at': isoformat(self.created_at)
        }
    
    def __repr__(self):
        return f'<AuditLog {self.action} {self.table_name}:{self.record_id}>'
