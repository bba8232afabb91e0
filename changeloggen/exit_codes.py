"""
Standard exit codes for changeloggen.

Following Unix/POSIX conventions for command-line tools.
"""
# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
BRANCH_NOT_FOUND = 64    # Named branch does not exist
REPOSITORY_ERROR = 65    # Path is not a readable git repository
PERMISSION_ERROR = 67    # Output sink not writable
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'IsADirectoryError': PERMISSION_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class UsageError(CommandError):
    """Raised for bad or missing command-line arguments."""
    def __init__(self, message: str):
        super().__init__(message, USAGE_ERROR)


class InvalidExtensionError(UsageError):
    """Raised when --output carries an extension that does not match the format."""
    def __init__(self, extension: str):
        super().__init__(f"Invalid extension {extension}")
        self.extension = extension


class BranchNotFoundError(CommandError):
    """Raised when a named branch is absent from the repository."""
    def __init__(self, branch: str):
        super().__init__(f"Branch {branch} not found", BRANCH_NOT_FOUND)
        self.branch = branch


class RepositoryError(CommandError):
    """Raised when the repository cannot be read."""
    def __init__(self, message: str):
        super().__init__(message, REPOSITORY_ERROR)
