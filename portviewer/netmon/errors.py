"""
Fetch Error Module - Failure taxonomy for the connection data source

TransportFailure is ConnectionFetchError; MissingDependencyError marks a
required host utility that is not installed.
"""
import re
from typing import Optional


MISSING_COMMAND_PATTERN = re.compile(r"([\w.-]+)?[:\s]*command not found", re.IGNORECASE)


class ConnectionFetchError(Exception):
    """The data source could not be reached or returned malformed data"""

    kind = 'transport'

    @property
    def diagnostic(self) -> str:
        """One-line message for the presentation layer"""
        message = str(self).strip().splitlines()
        detail = message[0] if message else "unknown error"
        return f"Failed to fetch connections: {detail}"


class MissingDependencyError(ConnectionFetchError):
    """A host utility required for enumeration is absent"""

    kind = 'missing_dependency'

    def __init__(self, message: str, command: Optional[str] = None):
        super().__init__(message)
        self.command = command

    @property
    def diagnostic(self) -> str:
        command = self.command or "a required system command"
        return (
            f"Missing dependency: {command} is not installed. "
            f"Install {command} or set PORTVIEW_BACKEND=psutil."
        )


def classify_fetch_error(exc: BaseException) -> ConnectionFetchError:
    """
    Map an arbitrary fetch failure onto the error taxonomy.

    Args:
        exc: Exception raised while fetching a snapshot

    Returns:
        MissingDependencyError when the failure text says a command was not
        found, the exception itself when it is already classified, and a
        generic ConnectionFetchError otherwise
    """
    if isinstance(exc, MissingDependencyError):
        return exc

    text = str(exc)
    match = MISSING_COMMAND_PATTERN.search(text)
    if match:
        classified = MissingDependencyError(text, command=match.group(1))
        classified.__cause__ = exc
        return classified

    if isinstance(exc, ConnectionFetchError):
        return exc

    classified = ConnectionFetchError(text or exc.__class__.__name__)
    classified.__cause__ = exc
    return classified
