"""
Status codes and exceptions.

Every call into the container reports a :class:`Status`. Negative values below
:data:`WARN_THRESHOLD` are hard errors and are raised as :class:`StoreError`;
the remaining non-zero values are warnings or information, which are logged
and never used for control flow.

Error messages are composed by :func:`format_error`:

>>> format_error("Error writing global attribute", "Title", Status.READ_ONLY)
'Error writing global attribute: Title [store error: File is open read-only]'
>>> format_error("Error reading time stamps", None, Status.OK)
'Error reading time stamps'
"""
import enum
import logging

logger = logging.getLogger(__name__)

WARN_THRESHOLD = -2000


class Severity(enum.Enum):
    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Information"
    SUCCESS = "Success"


class Status(enum.IntEnum):
    """Status codes reported by a store operation."""

    OK = 0

    # information
    ATTR_OVERWRITTEN = 1001
    COMPRESSION_IGNORED = 1002

    # warnings
    TIME_STAMPS_NOT_INCREASING = -1001
    DEFAULT_SUBSTITUTED = -1002

    # errors
    BAD_ARGUMENT = -2001
    NO_SUCH_ATTR = -2002
    NO_SUCH_ENTRY = -2003
    NO_SUCH_VAR = -2004
    ATTR_TYPE_MISMATCH = -2005
    DATA_TYPE_MISMATCH = -2006
    FILE_EXISTS = -2007
    NO_SUCH_FILE = -2008
    TOO_MANY_FILES = -2009
    BAD_HANDLE = -2010
    TOO_MANY_ENTRIES = -2011
    READ_ONLY = -2012
    FILE_CLOSED = -2013
    IO_ERROR = -2014

    @property
    def severity(self):
        if self < WARN_THRESHOLD:
            return Severity.ERROR
        elif self < Status.OK:
            return Severity.WARNING
        elif self > Status.OK:
            return Severity.INFO
        return Severity.SUCCESS

    @property
    def text(self):
        return _STATUS_TEXT[self]


_STATUS_TEXT = {
    Status.OK: "Function completed successfully",
    Status.ATTR_OVERWRITTEN: "An existing attribute entry was overwritten",
    Status.COMPRESSION_IGNORED: "Compression only applies to newly created files",
    Status.TIME_STAMPS_NOT_INCREASING: "Time stamps are not strictly increasing",
    Status.DEFAULT_SUBSTITUTED: "Unrecognized value replaced by a default",
    Status.BAD_ARGUMENT: "Illegal argument",
    Status.NO_SUCH_ATTR: "Named attribute not found",
    Status.NO_SUCH_ENTRY: "No such entry for specified attribute",
    Status.NO_SUCH_VAR: "Named variable not found",
    Status.ATTR_TYPE_MISMATCH: "Attribute entry has an unexpected data type",
    Status.DATA_TYPE_MISMATCH: "Variable has an unexpected data type",
    Status.FILE_EXISTS: "The file already exists",
    Status.NO_SUCH_FILE: "The file does not exist",
    Status.TOO_MANY_FILES: "Too many files are open",
    Status.BAD_HANDLE: "Invalid or closed file handle",
    Status.TOO_MANY_ENTRIES: "Too many entries for indexed attribute",
    Status.READ_ONLY: "File is open read-only",
    Status.FILE_CLOSED: "File has been closed",
    Status.IO_ERROR: "Input/output error in the underlying file",
}


def describe_status(status):
    """
    Decode a status to something that can be shown to a user.

    Examples
    --------
    >>> describe_status(Status.NO_SUCH_VAR)
    'Error: Named variable not found'
    >>> describe_status(Status.TIME_STAMPS_NOT_INCREASING)
    'Warning: Time stamps are not strictly increasing'
    >>> describe_status(Status.OK)
    'Success'
    """
    status = Status(status)
    severity = status.severity
    if severity is Severity.SUCCESS:
        return severity.value
    return "{}: {}".format(severity.value, status.text)


def format_error(operation, parameter=None, status=Status.OK):
    """
    Compose ``"<operation>: <parameter> [store error: <text>]"``.

    The parameter clause is left out when ``parameter`` is None and the
    store error clause when ``status`` is OK.
    """
    message = operation
    if parameter is not None:
        message = "{}: {}".format(message, parameter)
    status = Status(status)
    if status != Status.OK:
        message = "{} [store error: {}]".format(message, status.text)
    return message


def report_status(status, operation, parameter=None):
    """
    Route a status by severity.

    Errors are raised as :class:`StoreError`; warnings and information are
    logged and the call returns normally.
    """
    status = Status(status)
    severity = status.severity
    if severity is Severity.ERROR:
        raise StoreError(status, operation, parameter)
    elif severity is Severity.WARNING:
        logger.warning(format_error(operation, parameter, status))
    elif severity is Severity.INFO:
        logger.info(format_error(operation, parameter, status))


class ImagCDFError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, operation, parameter=None, status=Status.OK):
        self.operation = operation
        self.parameter = parameter
        self.status = Status(status)
        super().__init__(format_error(operation, parameter, status))


class StoreError(ImagCDFError):
    """A failure reported by the underlying attribute/variable store."""

    def __init__(self, status, operation, parameter=None):
        super().__init__(operation, parameter, status)


class AttributeNotFoundError(StoreError):
    pass


class VariableNotFoundError(StoreError):
    pass


class CapacityExceededError(StoreError):
    def __init__(self, capacity, parameter=None):
        self.capacity = capacity
        super().__init__(
            Status.TOO_MANY_FILES,
            "Cannot open more than {} files".format(capacity),
            parameter,
        )


class ValidationError(ImagCDFError):
    """A value was read successfully but is not an allowed value."""

    def __init__(self, field, value, expected):
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(
            "Invalid value {!r} (expected {})".format(value, expected), field
        )


class InvalidVariableTypeError(ImagCDFError):
    def __init__(self, parameter=None):
        super().__init__("Invalid variable type", parameter)


class MissingElementCodeError(ImagCDFError):
    def __init__(self, parameter=None):
        super().__init__("Missing or invalid element code", parameter)


class InvalidDateTimeError(ImagCDFError, ValueError):
    def __init__(self, parameter=None):
        super().__init__("Date/time cannot be represented", parameter)


class UnrecognizedValueError(ImagCDFError, ValueError):
    def __init__(self, kind, value):
        self.kind = kind
        self.value = value
        super().__init__("Unrecognized {}".format(kind), repr(value))
