from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, current_user
from tracker import db
from tracker.models import User
from tracker.utils import audit
from tracker.utils.decorators import role_required
from tracker.utils.errors import ValidationError, AuthError, Conflict

bp = Blueprint('auth', __name__, url_prefix='/auth')

@bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    phone_number = (data.get('phone_number') or '').strip()
    password = data.get('password')
    full_name = (data.get('full_name') or '').strip()

    if not phone_number or not password or not full_name:
        raise ValidationError('Missing required fields: phone_number, password and full_name')

    if User.query.filter_by(phone_number=phone_number).first():
        raise Conflict('Phone number already registered')

    user = User(
        phone_number=phone_number,
        full_name=full_name,
        role='teacher',
        telegram_chat_id=(str(data['telegram_chat_id']) if data.get('telegram_chat_id') else None)
    )
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    audit.log_user_event(user.id, 'user_registration', {
        'phone_number': user.phone_number,
        'full_name': user.full_name,
        'role': user.role
    })

    return jsonify(user.to_dict()), 201

@bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    phone_number = data.get('phone_number')
    password = data.get('password')
    remember = bool(data.get('remember'))

    if not phone_number or not password:
        raise ValidationError('Missing required fields: phone_number and password')

    user = User.query.filter_by(phone_number=phone_number).first()

    if not user or not user.check_password(password):
        raise AuthError('Invalid phone number or password', 401)

    if not user.is_active:
        raise AuthError('Account is inactive', 403)

    login_user(user, remember=remember)
    audit.log_user_event(user.id, 'user_login')

    return jsonify(user.to_dict())

@bp.route('/logout', methods=['POST'])
@role_required()
def logout():
    user_id = current_user.id
    logout_user()
    audit.log_user_event(user_id, 'user_logout')
    return jsonify({'success': True})
