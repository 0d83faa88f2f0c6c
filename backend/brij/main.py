import logging

from fastapi import Depends, FastAPI, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import audit, crud, json_schema, schemas, validation
from .db import Base, engine, get_db
from .schema_tables import VALID_CONDITIONS

logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="brij Rule Set Validator API")


@app.post("/validate", response_model=schemas.ValidationOut, response_model_exclude_none=True)
def validate_document(request: schemas.ValidateRequest, db: Session = Depends(get_db)):
    result = validation.validate(request.content)
    audit.record_audit(db, None, "VALIDATION_RUN", audit.summarize(result))
    return result.as_dict()


@app.get("/conditions", response_model=list[schemas.ConditionOut])
def list_conditions():
    return [
        schemas.ConditionOut(name=name, additional_fields=list(fields))
        for name, fields in VALID_CONDITIONS.items()
    ]


@app.get("/schema")
def get_schema():
    return json_schema.build_rule_set_schema()


@app.post("/rule-sets", response_model=schemas.RuleSetOut, status_code=status.HTTP_201_CREATED)
def create_rule_set(rule_set_in: schemas.RuleSetCreate, db: Session = Depends(get_db)):
    result = validation.validate(rule_set_in.content)
    if not result.valid:
        logger.info("Rejected rule set %s v%s", rule_set_in.name, rule_set_in.version)
        audit.record_audit(
            db,
            None,
            "RULE_SET_REJECTED",
            {"name": rule_set_in.name, "version": rule_set_in.version, **audit.summarize(result)},
        )
        raise HTTPException(status_code=422, detail=result.as_dict())

    try:
        document = crud.create_rule_set(db, rule_set_in)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Version already exists for this rule set")

    audit.record_audit(
        db,
        document.id,
        "RULE_SET_STORED",
        {"name": document.name, "version": document.version},
    )
    return document


@app.get("/rule-sets", response_model=list[schemas.RuleSetOut])
def list_rule_sets(name: str | None = None, db: Session = Depends(get_db)):
    return crud.list_rule_sets(db, name)


@app.get("/rule-sets/{rule_set_id}", response_model=schemas.RuleSetOut)
def get_rule_set(rule_set_id: int, db: Session = Depends(get_db)):
    document = crud.get_rule_set(db, rule_set_id)
    if not document:
        raise HTTPException(status_code=404, detail="Rule set not found")
    return document


@app.patch("/rule-sets/{rule_set_id}", response_model=schemas.RuleSetOut)
def update_rule_set(
    rule_set_id: int, rule_set_in: schemas.RuleSetUpdate, db: Session = Depends(get_db)
):
    document = crud.get_rule_set(db, rule_set_id)
    if not document:
        raise HTTPException(status_code=404, detail="Rule set not found")
    return crud.update_rule_set(db, document, rule_set_in)


@app.get(
    "/rule-sets/{rule_set_id}/validation",
    response_model=schemas.ValidationOut,
    response_model_exclude_none=True,
)
def revalidate_rule_set(rule_set_id: int, db: Session = Depends(get_db)):
    document = crud.get_rule_set(db, rule_set_id)
    if not document:
        raise HTTPException(status_code=404, detail="Rule set not found")
    result = validation.validate(document.content)
    audit.record_audit(db, document.id, "VALIDATION_RUN", audit.summarize(result))
    return result.as_dict()


@app.get("/rule-sets/{rule_set_id}/audit", response_model=list[schemas.AuditOut])
def list_rule_set_audit(rule_set_id: int, db: Session = Depends(get_db)):
    document = crud.get_rule_set(db, rule_set_id)
    if not document:
        raise HTTPException(status_code=404, detail="Rule set not found")
    return [crud.serialize_audit(record) for record in audit.list_audit(db, document.id)]
