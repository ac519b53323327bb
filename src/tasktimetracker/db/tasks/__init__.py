from .importance_orm import ImportanceORM
from .task_orm import TaskORM
from .tag_orm import TaskTagORM
from .tag_assignment_orm import TaskTagAssignmentORM

__all__ = ["ImportanceORM", "TaskORM", "TaskTagORM", "TaskTagAssignmentORM"]
