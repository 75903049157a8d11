from tracker import db
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from sqlalchemy.orm import validates
from tracker.utils.errors import ValidationError
from tracker.utils.helpers import school_now, isoformat

ROLES = ('teacher', 'admin')

class User(UserMixin, db.Model):
    __tablename__ = 'users'
    
    id = db.Column(db.Integer, primary_key=True)
    phone_number = db.Column(db.String(20), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='teacher')
    telegram_chat_id = db.Column(db.String(64))
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=school_now)
    
    @validates('role')
    def validate_role(self, key, role):
        if role not in ROLES:
            raise ValidationError(f'Unknown role: {role}')
        return role
    
    def set_password(self, password):
        self.password_hash = generate_password_hash(password)
    
    def check_password(self, password):
        return check_password_hash(self.password_hash, password)
    
    def is_admin(self):
        return self.role == 'admin'
    
    def to_dict(self):
        return {
            'id': self.id,
            'phone_number': self.phone_number,
            'full_name': self.full_name,
            'role': self.role,
            'telegram_chat_id': self.telegram_chat_id,
            'is_active': self.is_active,
            'created_at': isoformat(self.created_at)
        }
    
    def __repr__(self):
        return f'<User {self.phone_number}>'
