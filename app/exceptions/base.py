"""Base exception for the application hierarchy."""


class AppException(Exception):
    """Root of every exception raised by application code."""

    def __init__(self, message: str = "An application error occurred"):
        """
        Initialize the exception with a human-readable message.

        Parameters:
            message (str): Description of the failure, also used as the string form of the exception.
        """
        self.message = message
        super().__init__(message)
