"""
Mentorship feedback - test configuration and fixtures
"""
import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment before the settings object is built
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['LOG_PATH'] = tempfile.mkdtemp(prefix='mentorfeed-logs-')
os.environ['DEV_SIGN_IN_ENABLED'] = 'true'
os.environ['SMTP_USER'] = ''
os.environ['SMTP_PASSWORD'] = ''
os.environ['OPENAI_API_KEY'] = ''

from mentorfeed.app.main import app
from mentorfeed.app.services.authorization import Principal, parse_roles
from mentorfeed.app.services.links import issue_session_token
from mentorfeed.app.services.notification import NotificationService, get_notification_service
from mentorfeed.db import Base
from mentorfeed.db.models import Event, FeedbackForm, User, UserStatus
from mentorfeed.db.session import get_db

fake = Faker()

test_engine = create_engine(
    'sqlite://',
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autoflush=False, bind=test_engine)

RATING_QUESTION = {'id': 'q1', 'type': 'rating', 'label': 'How prepared was the mentee?', 'required': True, 'minRating': 1, 'maxRating': 5}


class RecordingNotifier(NotificationService):
    """Renders every notification like the real service but keeps it in memory."""

    def __init__(self):
        super().__init__()
        self.sent = []
        self.fail_for = set()
        self.undelivered = set()

    async def send(self, recipient, kind, params):
        self.render(kind, params)
        if recipient in self.fail_for:
            raise ConnectionError('SMTP unavailable')
        if recipient in self.undelivered:
            return False
        self.sent.append((recipient, kind, dict(params)))
        return True

    def kinds_for(self, recipient):
        return [kind for to, kind, _ in self.sent if to == recipient]


@pytest.fixture(scope='function')
def db():
    """Create a fresh database session for each test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(db, notifier):
    """Create test client with database and notifier overrides"""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_service] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(*roles, email=None, name=None, status=UserStatus.active):
        user = User(email=email or fake.unique.email(), name=name or fake.name(), status=status)
        user.set_roles(roles or ['user'])
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def principal_for():
    def _principal(user: User) -> Principal:
        return Principal(user_id=user.user_id, email=user.email, roles=parse_roles(user.roles), name=user.name)
    return _principal


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {'Authorization': f'Bearer {issue_session_token(user.user_id)}'}
    return _headers


@pytest.fixture
def make_form(db):
    def _make(owner: User, questions=None, name='Session feedback'):
        form = FeedbackForm(name=name, questions=questions or [dict(RATING_QUESTION)], created_by_user_id=owner.user_id)
        db.add(form)
        db.commit()
        db.refresh(form)
        return form
    return _make


@pytest.fixture
def make_event(db):
    def _make(organizer: User, form: FeedbackForm, name='Spring cohort', start=None):
        start = start or datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        event = Event(
            name=name,
            start_date=start,
            end_date=start + timedelta(days=30),
            organizer_id=organizer.user_id,
            feedback_form_id=form.form_id,
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event
    return _make
