class TaskStoreError(Exception):
    """Base class for errors raised by the task store"""


class DuplicateKeyError(TaskStoreError):
    """A task with the same title already exists"""

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Task with title '{title}' already exists")


class TaskValidationError(TaskStoreError):
    """Task fields failed store-level validation"""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")
