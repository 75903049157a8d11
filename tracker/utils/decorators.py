from functools import wraps
from flask import abort
from flask_login import current_user

def role_required(*roles):
    """Allow the view only for logged-in users holding one of ``roles``.

    With no roles, any logged-in user is allowed.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(401, description='Authentication required')

            if roles and current_user.role not in roles:
                abort(403, description=f'Access denied: {" or ".join(roles)} role required')

            return f(*args, **kwargs)
        return decorated_function
    return decorator
