from __future__ import annotations

import os
import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import unquote

from todolist.errors import PathRejected, Reason

_TRIM_CHARS = " \t\r\n"
_PATH_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_.-/")
_COMPONENT_RE = re.compile(r"[A-Za-z0-9_.-]+")
_DRIVE_RE = re.compile(r"[A-Za-z]:")
_MAX_DECODE_ROUNDS = 3


@dataclass(frozen=True, slots=True)
class ValidatedPath:
    """Build through PathValidator.validate, not by hand."""

    value: str

    @property
    def parts(self) -> tuple[str, ...]:
        return PurePosixPath(self.value).parts

    def under(self, root: Path) -> Path:
        return root.joinpath(*self.parts)

    def __str__(self) -> str:
        return self.value


def _decoded_forms(text: str) -> list[str]:
    forms = [text]
    current = text
    for _ in range(_MAX_DECODE_ROUNDS):
        decoded = unquote(current)
        if decoded == current:
            break
        forms.append(decoded)
        current = decoded
    return forms


def _check_text(text: str) -> None:
    """Raise :class:`PathRejected` unless ``text`` is a safe relative path."""
    for form in _decoded_forms(text):
        if form.startswith(("/", "\\")) or _DRIVE_RE.match(form):
            raise PathRejected(Reason.PATH_TRAVERSAL, "absolute paths are not allowed")
        if "\\" in form:
            raise PathRejected(Reason.PATH_TRAVERSAL, "backslash separators are not allowed")
        if ".." in form:
            raise PathRejected(Reason.PATH_TRAVERSAL, "parent directory reference not allowed")

    for char in text:
        if char in _PATH_CHARS:
            continue
        if unicodedata.category(char) == "Cc":
            raise PathRejected(
                Reason.INVALID_CHARACTERS,
                f"contains control character U+{ord(char):04X}",
            )
        raise PathRejected(Reason.INVALID_CHARACTERS, f"contains invalid character {char!r}")


def _normalize(text: str) -> str:
    return str(PurePosixPath(text))


class PathValidator:
    def validate(self, raw: Any) -> ValidatedPath:
        text = self._as_text(raw)

        _check_text(text)

        canonical = _normalize(text)
        try:
            _check_text(canonical)
        except PathRejected as exc:
            raise PathRejected(
                Reason.NORMALIZATION_INCONSISTENCY,
                f"normalized path {canonical!r} is unsafe: {exc.message}",
            ) from exc
        if _normalize(canonical) != canonical:
            raise PathRejected(
                Reason.NORMALIZATION_INCONSISTENCY,
                f"normalized path {canonical!r} is not stable",
            )

        parts = PurePosixPath(canonical).parts
        if not parts:
            raise PathRejected(Reason.EMPTY_PATH, "path has no components")

        for part in parts:
            if part in (".", "..") or not _COMPONENT_RE.fullmatch(part):
                raise PathRejected(Reason.COMPONENT_INVALID, f"invalid path component {part!r}")

        return ValidatedPath(canonical)

    def is_valid(self, raw: Any) -> bool:
        try:
            self.validate(raw)
        except PathRejected:
            return False
        return True

    @staticmethod
    def _as_text(raw: Any) -> str:
        if raw is None:
            raise PathRejected(Reason.EMPTY_OR_MISSING, "filename cannot be missing")
        if isinstance(raw, os.PathLike):
            raw = os.fspath(raw)
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise PathRejected(Reason.INVALID_CHARACTERS, "filename is not valid UTF-8") from exc
        if not isinstance(raw, str):
            raise PathRejected(
                Reason.INVALID_CHARACTERS,
                f"filename must be text, got {type(raw).__name__}",
            )

        text = raw.strip(_TRIM_CHARS)
        if not text:
            raise PathRejected(Reason.EMPTY_OR_MISSING, "filename cannot be empty")
        return text


_default_validator = PathValidator()


def validate_path(raw: Any) -> ValidatedPath:
    return _default_validator.validate(raw)
