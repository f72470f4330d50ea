from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from medagenda.core import config


connect_args = {'check_same_thread': False} if config.DATABASE_URL.startswith('sqlite') else {}

engine = create_engine(config.DATABASE_URL, echo=config.SQL_ECHO, connect_args=connect_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_scheduling_indexes_checked = False

SCHEDULING_INDEXES = {
    'appointments': [
        'CREATE INDEX IF NOT EXISTS idx_appointments_doctor_start ON appointments(doctor_id, start_time)',
        'CREATE INDEX IF NOT EXISTS idx_appointments_doctor_status ON appointments(doctor_id, status)',
    ],
    'events': [
        'CREATE INDEX IF NOT EXISTS idx_events_doctor_dates ON events(doctor_id, start_date, end_date)',
    ],
    'pto_periods': [
        'CREATE INDEX IF NOT EXISTS idx_pto_doctor_dates ON pto_periods(doctor_id, start_date, end_date)',
    ],
}


def ensure_scheduling_indexes(bind=None) -> None:
    global _scheduling_indexes_checked

    if _scheduling_indexes_checked and bind is None:
        return

    target = bind if bind is not None else engine

    with _schema_lock:
        if _scheduling_indexes_checked and bind is None:
            return

        existing_tables = set(inspect(target).get_table_names())

        with target.begin() as connection:
            for table_name, statements in SCHEDULING_INDEXES.items():
                if table_name not in existing_tables:
                    continue
                for statement in statements:
                    connection.execute(text(statement))

        if bind is None:
            _scheduling_indexes_checked = True


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
