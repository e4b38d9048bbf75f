import datetime


class ContractViolation(RuntimeError):
    """
    Raised when the motion engine is driven in a way it does not allow, e.g.
    advancing the phase state of a motor that has no active motion task. Not
    recoverable.
    """
    pass


class MotionSuperseded(Exception):

    def __init__(self, task, reason: str = "superseded", *args):
        super().__init__(*args)
        self.task = task
        self.reason = reason
        self.timestamp = datetime.datetime.now()

    def __str__(self):
        return f"[{self.timestamp}] motion task {self.reason}: {self.task!r}"


class ConfigurationError(Exception):
    pass
