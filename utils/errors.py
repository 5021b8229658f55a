"""
Defines custom exception classes for the application.
"""

class PRMCPException(Exception):
    """Base exception class for pr-mcp."""
    pass

class NotARepositoryError(PRMCPException):
    """Raised when no git repository encloses the working directory."""

    def __init__(self, message: str = "Not in a git repository"):
        super().__init__(message)

class TargetBranchNotFoundError(PRMCPException):
    """Raised when neither the local nor the origin form of a branch exists."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Target branch '{branch}' not found")

class MissingArgumentError(PRMCPException):
    """Raised when a tool is invoked without the arguments it needs."""
    pass

class ExternalCommandError(PRMCPException):
    """Raised when a mutating git or gh command exits with an error."""

    def __init__(self, command, stderr: str = ""):
        self.command = list(command)
        self.stderr = stderr
        detail = f": {stderr}" if stderr else ""
        super().__init__(f"Command '{' '.join(self.command[:3])}' failed{detail}")

class ConfigError(PRMCPException):
    """Raised when there is a configuration error."""
    pass

class FormatterError(PRMCPException):
    """Raised when an error occurs while rendering a response."""
    pass
