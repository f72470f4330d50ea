import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from medagenda.core import config
from medagenda.database import Base, engine, ensure_scheduling_indexes
from medagenda.models import appointment, consultation_type, doctor, event, pto, timeplan  # noqa: F401
from medagenda.routes import (
    appointment_routes,
    availability_routes,
    consultation_type_routes,
    event_routes,
    pto_routes,
    timeplan_routes,
)

app = FastAPI(title='MedAgenda API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()

    try:
        Base.metadata.create_all(bind=engine)
        ensure_scheduling_indexes()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'MedAgenda API Running'}


app.include_router(availability_routes.router, prefix='/availability')
app.include_router(timeplan_routes.router, prefix='/timeplan')
app.include_router(pto_routes.router, prefix='/pto')
app.include_router(event_routes.router, prefix='/events')
app.include_router(consultation_type_routes.router, prefix='/consultation-types')
app.include_router(appointment_routes.router, prefix='/appointments')
