"""Exceptions raised by the trigger demo runner."""


class TriggerDemoError(Exception):
    pass


class DriverLoadError(TriggerDemoError):
    pass


class DatabaseConnectionError(TriggerDemoError):
    pass


class QueryError(TriggerDemoError):
    """A statement was rejected: constraint, trigger, bad SQL or bad parameters."""
    pass


class CloseError(TriggerDemoError):
    pass
