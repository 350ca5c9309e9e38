"""Failures that terminate a record stream."""


class WrfOutputError(Exception):
    """Base class for every failure a record stream can end with."""


class MissingStartInstantError(WrfOutputError):
    def __init__(self, line: str = ""):
        self.line = line
        message = "Start line not found yet"
        if line:
            message += f", cannot decode timing line `{line}`"
        super().__init__(message)


class LineFormatError(WrfOutputError):
    """A recognized log line that could not be decoded."""

    line_kind = "timing"

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Wrong format for {self.line_kind} line `{line}`: {reason}")


class MalformedStartLineError(LineFormatError):
    line_kind = "start instant"


class InvalidStartInstantError(LineFormatError):
    line_kind = "start instant"


class MissingDomainMarkerError(LineFormatError):
    pass


class MalformedFilenameError(LineFormatError):
    pass


class InvalidDomainError(LineFormatError):
    pass


class InvalidInstantError(LineFormatError):
    pass


class StreamIncompleteError(WrfOutputError):
    def __init__(self):
        super().__init__("input stream completed without success log line")


class WatchdogTimeoutError(WrfOutputError):
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(
            f"Timeout expired: no new files created for more than {timeout:g}s"
        )


class CompletionHookError(WrfOutputError):
    def __init__(self, cause: BaseException):
        super().__init__(f"OnClose hook failed: {cause}")
        self.__cause__ = cause


class SourceReadError(WrfOutputError):
    def __init__(self, cause: BaseException):
        super().__init__(str(cause))
        self.__cause__ = cause


class HandlerError(WrfOutputError):
    def __init__(self, cause: BaseException):
        super().__init__(f"OnFileDo handler failed: {cause}")
        self.__cause__ = cause


class MarshalError(WrfOutputError):
    def __init__(self, cause: BaseException):
        super().__init__(f"Marshal failed: error while writing: {cause}")
        self.__cause__ = cause


class UnmarshalError(WrfOutputError):
    def __init__(self, cause: BaseException):
        super().__init__(f"Unmarshal failed: error while reading: {cause}")
        self.__cause__ = cause
