from datetime import datetime, timedelta, timezone

import jwt

from medagenda.core import config
from medagenda.models.doctor import Doctor

DOCTOR_ROLE = "doctor"


def create_access_token(doctor: Doctor, expires_minutes: int | None = None) -> str:
    """Bearer token naming the doctor by email (``sub``) and id (``doctor_id``)."""
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": doctor.email.strip().lower(),
        "doctor_id": doctor.id,
        "role": DOCTOR_ROLE,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES),
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    if payload.get("role") != DOCTOR_ROLE:
        raise jwt.InvalidTokenError("Token was not issued for a doctor")
    return payload
