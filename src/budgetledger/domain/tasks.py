"""Follow-up tasks raised for the user during reconciliation."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterator, Optional

from budgetledger.domain.entities import Account
from budgetledger.domain.errors import InvalidStateError


class TaskPriority(str, Enum):
    NORMAL = "normal"
    HIGH = "high"


@dataclass(frozen=True)
class ToDoTask:
    """Something the user needs to do or check."""

    description: str
    system_generated: bool = False
    can_delete: bool = True
    priority: TaskPriority = TaskPriority.NORMAL


@dataclass(frozen=True)
class TransferTask(ToDoTask):
    """A bank transfer the user needs to make between two accounts."""

    amount: Decimal = Decimal("0")
    source_account: Optional[Account] = None
    destination_account: Optional[Account] = None
    bucket_code: Optional[str] = None
    reference: Optional[str] = None


class ToDoCollection:
    """Ordered task list owned by the caller of a reconciliation."""

    def __init__(self, tasks=None):
        self._tasks: list[ToDoTask] = list(tasks or [])

    def add(self, task: ToDoTask) -> None:
        self._tasks.append(task)

    def remove(self, task: ToDoTask) -> None:
        """Remove a task.

        Raises:
            InvalidStateError: If the task may not be deleted
        """
        if not task.can_delete:
            raise InvalidStateError(f"Task cannot be deleted: {task.description}")
        self._tasks.remove(task)

    def transfer_tasks(self) -> list[TransferTask]:
        return [t for t in self._tasks if isinstance(t, TransferTask)]

    def __iter__(self) -> Iterator[ToDoTask]:
        return iter(list(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def __getitem__(self, index: int) -> ToDoTask:
        return self._tasks[index]
