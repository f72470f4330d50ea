import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from medagenda.auth import jwt_handler
from medagenda.database import get_db
from medagenda.models.doctor import Doctor

security = HTTPBearer()


def get_current_doctor(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Doctor:
    token = credentials.credentials
    try:
        payload = jwt_handler.decode_access_token(token)
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    email = payload.get("sub")
    if not email:
        raise HTTPException(status_code=401, detail="Invalid token subject")

    doctor = db.query(Doctor).filter(Doctor.email == email.strip().lower()).first()
    if doctor is None:
        raise HTTPException(status_code=401, detail="Doctor not found")
    if payload.get("doctor_id") not in (None, doctor.id):
        raise HTTPException(status_code=401, detail="Invalid token subject")
    if not doctor.is_active:
        raise HTTPException(status_code=403, detail="Doctor account is disabled")
    return doctor
