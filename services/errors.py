"""Errors raised by the CDR sinks."""


class CdrPersistenceError(Exception):
    """A configured sink could not persist a CDR."""

    def __init__(self, sink, message):
        super().__init__(f"{sink}: {message}")
        self.sink = sink


class SinkUnavailableError(CdrPersistenceError):
    """The sink's file, connection or statement could not be acquired."""


class SinkWriteError(CdrPersistenceError):
    """The append or insert itself failed."""
