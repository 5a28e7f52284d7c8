import re
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from task_service import models, schemas
from task_service.exceptions import DuplicateKeyError, TaskValidationError
from task_service.logger import logger

_TASK_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def is_valid_task_id(task_id: str) -> bool:
    return bool(task_id) and _TASK_ID_RE.match(task_id) is not None


class TaskStore:
    """Data access for tasks, bound to a single database session.

    Absent tasks come back as ``None``; the only store-specific errors are
    ``DuplicateKeyError`` for a taken title and ``TaskValidationError`` for
    an empty one. Any other ``SQLAlchemyError`` is logged and re-raised.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> list[models.Task]:
        """Get all tasks in insertion order"""
        try:
            return self.db.query(models.Task).order_by(models.Task.seq).all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching tasks: {str(e)}")
            raise

    def get_by_id(self, task_id: str) -> Optional[models.Task]:
        """Get a single task by ID, or None if it does not exist"""
        if not is_valid_task_id(task_id):
            return None
        try:
            return self.db.query(models.Task).filter(models.Task.id == task_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching task {task_id}: {str(e)}")
            raise

    def create(self, task: schemas.TaskCreate) -> models.Task:
        """Create a new task"""
        data = task.model_dump()
        data["title"] = _require_title(data.get("title"))
        db_task = models.Task(**data)
        self.db.add(db_task)
        self._commit(db_task.title, "creating task")
        self.db.refresh(db_task)
        logger.info(f"Created task with ID: {db_task.id}")
        return db_task

    def update_by_id(self, task_id: str, task: schemas.TaskUpdate) -> Optional[models.Task]:
        """Apply the supplied fields to an existing task"""
        db_task = self.get_by_id(task_id)
        if db_task is None:
            return None
        update_data = task.model_dump(exclude_unset=True)
        if "title" in update_data:
            update_data["title"] = _require_title(update_data["title"])
        for key, value in update_data.items():
            setattr(db_task, key, value)
        db_task.updated_at = models.utcnow()
        self._commit(db_task.title, f"updating task {task_id}")
        self.db.refresh(db_task)
        logger.info(f"Updated task with ID: {task_id}")
        return db_task

    def delete_by_id(self, task_id: str) -> Optional[schemas.Task]:
        """Delete a task, returning it as it was before removal"""
        db_task = self.get_by_id(task_id)
        if db_task is None:
            return None
        snapshot = schemas.Task.model_validate(db_task)
        try:
            self.db.delete(db_task)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting task {task_id}: {str(e)}")
            raise
        logger.info(f"Deleted task with ID: {task_id}")
        return snapshot

    def _commit(self, title: str, action: str):
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            # Title is checked before writing, so the unique index is the
            # only constraint left to violate
            logger.info(f"Duplicate title while {action}: {title!r}")
            raise DuplicateKeyError(title) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error {action}: {str(e)}")
            raise


def _require_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise TaskValidationError("title", "should not be empty")
    return title
