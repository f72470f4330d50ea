import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from medagenda.database import Base  # noqa: E402
from medagenda.models import appointment, consultation_type, event, pto, timeplan  # noqa: E402,F401
from medagenda.models.doctor import Doctor  # noqa: E402


@pytest.fixture
def db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def doctor(db) -> Doctor:
    record = Doctor(email='house@clinic.example', name='Dr House')
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def other_doctor(db) -> Doctor:
    record = Doctor(email='wilson@clinic.example', name='Dr Wilson')
    db.add(record)
    db.commit()
    db.refresh(record)
    return record
