from tracker import db
from tracker.utils.helpers import school_now, isoformat

MIN_GRADE = 7
MAX_GRADE = 9

class SchoolClass(db.Model):
    __tablename__ = 'classes'
    
    id = db.Column(db.Integer, primary_key=True)
    grade = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=school_now)
    updated_at = db.Column(db.DateTime, default=school_now, onupdate=school_now)
    
    teacher = db.relationship('User', backref='classes', foreign_keys=[teacher_id])
    
    __table_args__ = (
        db.UniqueConstraint('grade', 'name', name='unique_class_per_grade'),
        db.CheckConstraint(f'grade BETWEEN {MIN_GRADE} AND {MAX_GRADE}', name='check_class_grade_range'),
    )
    
    @property
    def display_name(self):
        return f'{self.grade} {self.name}'
    
    def to_dict(self):
        return {
            'id': self.id,
            'grade': self.grade,
            'name': self.name,
            'teacher_id': self.teacher_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
    
    def __repr__(self):
        return f'<SchoolClass {self.grade} {self.name}>'
