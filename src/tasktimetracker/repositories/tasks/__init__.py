from .sql_repositoryImportance import ImportanceRepository
from .sql_repositoryTask import TaskRepository

__all__ = ["ImportanceRepository", "TaskRepository"]
