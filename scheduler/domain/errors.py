class SchedulerError(Exception):
    """Base class for scheduling errors."""


class InvalidGradeError(SchedulerError, ValueError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"invalid grade: {value!r} (expected one of 0-3)")
