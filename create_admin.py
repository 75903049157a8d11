#!/usr/bin/env python3
"""
Create an admin account, or promote an existing user to admin.

Usage: python create_admin.py <phone_number> <full_name> <password>
"""

import sys
from tracker import create_app, db
from tracker.models import User

def main(argv):
    if len(argv) != 4:
        print(__doc__.strip())
        return 1

    phone_number, full_name, password = argv[1], argv[2], argv[3]
    app = create_app()

    with app.app_context():
        user = User.query.filter_by(phone_number=phone_number).first()
        if user:
            print(f"Promoting existing user {user.full_name} to admin")
        else:
            user = User(phone_number=phone_number, full_name=full_name)
            db.session.add(user)
            print(f"Creating admin {full_name}")

        user.role = 'admin'
        user.is_active = True
        user.set_password(password)

        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            print(f"Error saving admin: {e}")
            return 1

        print("Done.")
        return 0

if __name__ == '__main__':
    sys.exit(main(sys.argv))
