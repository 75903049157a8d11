from tracker import db
from tracker.utils.helpers import school_now, isoformat

class ReminderLog(db.Model):
    __tablename__ = 'reminder_logs'
    
    id = db.Column(db.Integer, primary_key=True)
    assignment_id = db.Column(db.Integer, db.ForeignKey('assignments.id', ondelete='CASCADE'), nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    sent_at = db.Column(db.DateTime, nullable=False, default=school_now)
    message_id = db.Column(db.String(100))
    message_content = db.Column(db.Text)
    status = db.Column(db.String(20), default='sent')
    created_at = db.Column(db.DateTime, default=school_now)
    
    assignment = db.relationship('Assignment', backref=db.backref('reminder_logs', cascade='all, delete-orphan'))
    teacher = db.relationship('User', foreign_keys=[teacher_id])
    
    __table_args__ = (db.UniqueConstraint('assignment_id', 'teacher_id', name='unique_reminder_per_teacher'),)
    
    def to_dict(self):
        return {
            'id': self.id,
            'assignment_id': self.assignment_id,
            'teacher_id': self.teacher_id,
            'sent_at': isoformat(self.sent_at),
            'message_id': self.message_id,
            'status': self.status
        }
    
    def __repr__(self):
        return f'<ReminderLog Assignment:{self.assignment_id} Teacher:{self.teacher_id}>'
