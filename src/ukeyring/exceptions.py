class UkeyringError(Exception):
    pass


class ParseError(UkeyringError):
    pass


class KeyServerError(UkeyringError):
    pass


class KeyNotFoundError(KeyServerError):
    pass


class ConnectivityError(KeyServerError):
    pass


class ExtractionError(KeyServerError):
    pass


class KeyContentsError(UkeyringError):
    pass


class TypeMismatchError(KeyContentsError):
    pass


class MultipleKeysError(KeyContentsError):
    pass


class AmbiguousInputError(KeyContentsError):
    pass


class ValidationError(UkeyringError):
    pass


class ConfigurationError(ValidationError):
    pass


class ProcessError(UkeyringError):
    """Raised when an external command exits non-zero or times out.
    Keeps the command and everything it printed."""

    def __init__(self, args, returncode, stdout="", stderr=""):
        self.cmd_args = list(args)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        if returncode is None:
            message = "Command timed out: %s" % " ".join(self.cmd_args)
        else:
            message = "[%d] Failed to run command: %s" % (returncode, " ".join(self.cmd_args))
        if stderr:
            message += "\n%s" % stderr.strip()
        super().__init__(message)
