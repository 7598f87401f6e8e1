"""Task list domain service."""

from budgetledger.database.base import Database
from budgetledger.domain.errors import InvalidStateError, NotFoundError
from budgetledger.domain.tasks import ToDoTask


class TaskService:
    """Service for the stored follow-up task list."""

    def __init__(self, db: Database):
        """Initialize task service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_tasks(self) -> list[tuple[int, ToDoTask]]:
        return self.db.list_tasks()

    def remove_task(self, task_id: int) -> None:
        """Remove a completed task.

        Raises:
            NotFoundError: If the task doesn't exist
            InvalidStateError: If the task may not be deleted
        """
        task = self.db.get_task(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        if not task.can_delete:
            raise InvalidStateError(f"Task {task_id} cannot be deleted")
        self.db.delete_task(task_id)
