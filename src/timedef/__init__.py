"""timedef — calendar periods and recurrence expressions."""

__version__ = "0.4.0"
