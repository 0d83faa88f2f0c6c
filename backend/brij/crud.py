import json

from sqlalchemy.orm import Session

from . import models, schemas


def get_rule_set(db: Session, rule_set_id: int):
    return db.query(models.RuleSetDocument).filter(models.RuleSetDocument.id == rule_set_id).first()


def list_rule_sets(db: Session, name: str | None = None):
    query = db.query(models.RuleSetDocument)
    if name is not None:
        query = query.filter(models.RuleSetDocument.name == name)
    return query.order_by(models.RuleSetDocument.name, models.RuleSetDocument.version.desc()).all()


def _deactivate_others(db: Session, name: str, keep_id: int | None = None):
    query = db.query(models.RuleSetDocument).filter(
        models.RuleSetDocument.name == name,
        models.RuleSetDocument.is_active.is_(True),
    )
    if keep_id is not None:
        query = query.filter(models.RuleSetDocument.id != keep_id)
    query.update({"is_active": False})


def create_rule_set(db: Session, rule_set_in: schemas.RuleSetCreate):
    if rule_set_in.is_active:
        _deactivate_others(db, rule_set_in.name)

    document = models.RuleSetDocument(**rule_set_in.model_dump())
    db.add(document)
    db.commit()
    db.refresh(document)
    return document


def update_rule_set(db: Session, document: models.RuleSetDocument, rule_set_in: schemas.RuleSetUpdate):
    data = rule_set_in.model_dump(exclude_unset=True)
    if data.get("is_active") is True:
        _deactivate_others(db, document.name, keep_id=document.id)

    for key, value in data.items():
        setattr(document, key, value)

    db.commit()
    db.refresh(document)
    return document


def serialize_audit(record: models.AuditLog) -> schemas.AuditOut:
    return schemas.AuditOut(
        id=record.id,
        timestamp=record.timestamp,
        document_id=record.document_id,
        event_type=record.event_type,
        payload=json.loads(record.payload_json),
    )
