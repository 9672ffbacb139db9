"""Single-document expense configuration (categories, subcategories, modes)."""
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from expense_tracker.errors import ValidationError

from . import models, schemas


def _find(db: Session):
    return db.get(models.ExpenseConfig, models.SINGLETON_ID)


def _create_default(db: Session) -> models.ExpenseConfig:
    config = models.ExpenseConfig(
        id=models.SINGLETON_ID,
        categories=[],
        subcategories={},
        modes=[],
    )
    db.add(config)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the row first; use theirs
        db.rollback()
        return _find(db)
    db.refresh(config)
    logger.info("Created default config document")
    return config


# ================= GET OR CREATE =================
def get_or_create(db: Session) -> models.ExpenseConfig:
    config = _find(db)
    if config is None:
        config = _create_default(db)
    return config


# ================= UPSERT =================
def upsert(
    db: Session,
    partial: schemas.ConfigUpdate | dict,
    updated_by: str = "api",
) -> models.ExpenseConfig:
    if not isinstance(partial, schemas.ConfigUpdate):
        try:
            partial = schemas.ConfigUpdate.model_validate(partial or {})
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(p) for p in first["loc"])
            raise ValidationError(f"{field}: {first['msg']}")

    data = partial.model_dump(exclude_unset=True, exclude_none=True)

    config = get_or_create(db)
    for field, value in data.items():
        setattr(config, field, value)
    config.updated_by = updated_by

    db.commit()
    db.refresh(config)

    logger.info(f"Config updated by {updated_by}: {', '.join(sorted(data)) or 'no fields'}")
    return config
