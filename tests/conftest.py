"""Pytest configuration and shared fixtures.

Every test gets a fresh application backed by an in-memory SQLite database.
"""

import pytest

from config import Config
from tracker import create_app, db
from tracker.models import User, SchoolClass

PASSWORD = 'secret-password'


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    TELEGRAM_BOT_TOKEN = ''
    REMINDER_SCHEDULER_ENABLED = False
    SCHOOL_NAME = 'Test School'


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = {'n': 0}

    def _make_user(role='teacher', full_name=None, telegram_chat_id=None):
        counter['n'] += 1
        user = User(
            phone_number=f'0812000{counter["n"]:04d}',
            full_name=full_name or f'{role.title()} {counter["n"]}',
            role=role,
            telegram_chat_id=telegram_chat_id
        )
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_class(app):
    def _make_class(name, grade=7, teacher=None):
        school_class = SchoolClass(grade=grade, name=name, teacher_id=teacher.id if teacher else None)
        db.session.add(school_class)
        db.session.commit()
        return school_class

    return _make_class


@pytest.fixture
def teacher(make_user):
    return make_user('teacher', full_name='Siti Rahma', telegram_chat_id='1001')


@pytest.fixture
def admin(make_user):
    return make_user('admin', full_name='Admin')


@pytest.fixture
def login(client):
    def _login(user):
        response = client.post('/auth/login', json={
            'phone_number': user.phone_number,
            'password': PASSWORD
        })
        assert response.status_code == 200
        return client

    return _login
