"""
This module contains the IOInterface abstract base class and its implementations.

The simulator never asks for input; an interface is only a sink for the
driver's progress reports and scoreboards.
"""

from abc import ABC, abstractmethod


class IOInterface(ABC):
    """
    Abstract base class for an output sink.
    """

    @abstractmethod
    def output(self, message: str) -> None:
        """Output a message to the interface."""
        pass


class DummyIOInterface(IOInterface):
    """A dummy IO interface for quiet runs. Discards everything."""

    def output(self, message: str) -> None:
        pass


class TestIOInterface(IOInterface):
    """
    A test IO interface. Collects output messages for later inspection.
    """

    __test__ = False

    def __init__(self):
        self.sent_messages = []

    def output(self, message: str) -> None:
        self.sent_messages.append(message)


class ConsoleIOInterface(IOInterface):
    """Writes messages to standard output."""

    def output(self, message: str) -> None:
        print(message)


class LoggingIOInterface(IOInterface):
    """
    Appends output messages to a log file.
    """

    def __init__(self, log_file_path: str):
        self.log_file_path = log_file_path

    def output(self, message: str) -> None:
        """Write an output message to the log file."""
        with open(self.log_file_path, "a", encoding="utf-8") as log_file:
            log_file.write(message + "\n")
