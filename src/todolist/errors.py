from __future__ import annotations

from enum import StrEnum


class ErrorCategory(StrEnum):
    INPUT = "InputError"
    PATH_REJECTED = "PathRejected"
    FILE_ACCESS = "FileAccessError"
    IO = "IOError"
    DATA_INTEGRITY = "DataIntegrityError"


class Reason(StrEnum):
    """Why a path was rejected or a save/load failed."""

    # path validation
    EMPTY_OR_MISSING = "EmptyOrMissing"
    INVALID_CHARACTERS = "InvalidCharacters"
    PATH_TRAVERSAL = "PathTraversal"
    NORMALIZATION_INCONSISTENCY = "NormalizationInconsistency"
    EMPTY_PATH = "EmptyPath"
    COMPONENT_INVALID = "ComponentInvalid"

    # file access
    CANNOT_CREATE_FILE = "CannotCreateFile"
    FILE_NOT_FOUND = "FileNotFound"
    NOT_READABLE = "NotReadable"

    IO_ERROR = "IOError"

    # payload
    CORRUPT_DATA = "CorruptData"
    UNEXPECTED_SHAPE = "UnexpectedShape"
    INVALID_ELEMENT = "InvalidElement"

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]

    @property
    def is_path_rejection(self) -> bool:
        return self.category in (ErrorCategory.INPUT, ErrorCategory.PATH_REJECTED)


_CATEGORIES = {
    Reason.EMPTY_OR_MISSING: ErrorCategory.INPUT,
    Reason.INVALID_CHARACTERS: ErrorCategory.PATH_REJECTED,
    Reason.PATH_TRAVERSAL: ErrorCategory.PATH_REJECTED,
    Reason.NORMALIZATION_INCONSISTENCY: ErrorCategory.PATH_REJECTED,
    Reason.EMPTY_PATH: ErrorCategory.PATH_REJECTED,
    Reason.COMPONENT_INVALID: ErrorCategory.PATH_REJECTED,
    Reason.CANNOT_CREATE_FILE: ErrorCategory.FILE_ACCESS,
    Reason.FILE_NOT_FOUND: ErrorCategory.FILE_ACCESS,
    Reason.NOT_READABLE: ErrorCategory.FILE_ACCESS,
    Reason.IO_ERROR: ErrorCategory.IO,
    Reason.CORRUPT_DATA: ErrorCategory.DATA_INTEGRITY,
    Reason.UNEXPECTED_SHAPE: ErrorCategory.DATA_INTEGRITY,
    Reason.INVALID_ELEMENT: ErrorCategory.DATA_INTEGRITY,
}


class TodoListError(Exception):
    def __init__(self, reason: Reason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class PathRejected(TodoListError, ValueError):
    """A caller-supplied filename is not a safe relative path."""


class PayloadError(TodoListError):
    """A stored blob could not be decoded into a list of tasks."""
