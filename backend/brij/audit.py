import json
from datetime import datetime

from sqlalchemy.orm import Session

from . import models
from .validation import ValidationResult


def record_audit(db: Session, document_id: int | None, event_type: str, payload: dict):
    record = models.AuditLog(
        timestamp=datetime.utcnow(),
        document_id=document_id,
        event_type=event_type,
        payload_json=json.dumps(payload),
    )
    db.add(record)
    db.commit()
    return record


def summarize(result: ValidationResult) -> dict:
    return {
        "valid": result.valid,
        "error_count": len(result.errors or []),
        "critical": result.critical,
    }


def list_audit(db: Session, document_id: int | None = None):
    query = db.query(models.AuditLog)
    if document_id is not None:
        query = query.filter(models.AuditLog.document_id == document_id)
    return query.order_by(models.AuditLog.id).all()
