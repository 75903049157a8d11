from tracker import db
from sqlalchemy.orm import validates
from tracker.utils.errors import ValidationError
from tracker.utils.helpers import school_now, isoformat

ASSIGNMENT_TYPES = ('task', 'exam')
ASSIGNMENT_STATUSES = ('pending', 'graded', 'overdue')

class Assignment(db.Model):
    __tablename__ = 'assignments'
    
    id = db.Column(db.Integer, primary_key=True)
    subject = db.Column(db.String(200), nullable=False)
    learning_goal = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(20), nullable=False)
    week_number = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='pending')
    assigned_date = db.Column(db.Date, nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    created_at = db.Column(db.DateTime, default=school_now)
    updated_at = db.Column(db.DateTime, default=school_now, onupdate=school_now)
    
    teacher = db.relationship('User', backref='assignments', foreign_keys=[teacher_id])
    class_links = db.relationship('ClassAssignment', backref='assignment', lazy='dynamic', cascade='all, delete-orphan')
    grading = db.relationship('AssignmentStatus', backref='assignment', uselist=False, cascade='all, delete-orphan')
    
    __table_args__ = (
        db.Index('idx_assignments_teacher_week', 'teacher_id', 'year', 'week_number'),
    )
    
    @validates('status')
    def validate_status(self, key, value):
        if value not in ASSIGNMENT_STATUSES:
            raise ValidationError(f'Unknown assignment status: {value}')
        return value
    
    def to_dict(self):
        return {
            'id': self.id,
            'subject': self.subject,
            'learning_goal': self.learning_goal,
            'type': self.type,
            'week_number': self.week_number,
            'year': self.year,
            'status': self.status,
            'assigned_date': isoformat(self.assigned_date),
            'teacher_id': self.teacher_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
    
    def __repr__(self):
        return f'<Assignment {self.subject} W{self.week_number}/{self.year}>'


class ClassAssignment(db.Model):
    __tablename__ = 'class_assignments'
    
    class_id = db.Column(db.Integer, db.ForeignKey('classes.id', ondelete='CASCADE'), primary_key=True)
    assignment_id = db.Column(db.Integer, db.ForeignKey('assignments.id', ondelete='CASCADE'), primary_key=True)
    assigned_at = db.Column(db.DateTime, default=school_now)
    
    school_class = db.relationship('SchoolClass', backref=db.backref('assignment_links', lazy='dynamic'))
    
    def __repr__(self):
        return f'<ClassAssignment Class:{self.class_id} Assignment:{self.assignment_id}>'


class AssignmentStatus(db.Model):
    __tablename__ = 'assignment_statuses'
    
    assignment_id = db.Column(db.Integer, db.ForeignKey('assignments.id', ondelete='CASCADE'), primary_key=True)
    is_graded = db.Column(db.Boolean, nullable=False, default=False)
    graded_at = db.Column(db.DateTime, nullable=True)
    grade_input_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=school_now)
    updated_at = db.Column(db.DateTime, default=school_now, onupdate=school_now)
    
    grader = db.relationship('User', foreign_keys=[grade_input_by])
    
    def to_dict(self):
        return {
            'assignment_id': self.assignment_id,
            'is_graded': self.is_graded,
            'graded_at': isoformat(self.graded_at),
            'grade_input_by': self.grade_input_by
        }
    
    def __repr__(self):
        return f'<AssignmentStatus {self.assignment_id} graded={self.is_graded}>'
