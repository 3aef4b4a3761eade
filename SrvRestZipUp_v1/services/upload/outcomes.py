# -*- coding: utf-8 -*-
# SrvRestZipUp_v1/services/upload/outcomes.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Union


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    VALIDATION_REJECTED = "validation_rejected"
    SIZE_EXCEEDED = "size_exceeded"
    MALFORMED_REQUEST = "malformed_request"
    ABORTED = "aborted"
    IO_FAILURE = "io_failure"


@dataclass(frozen=True)
class StoredFile:
    path: Path
    stored_name: str
    bytes_written: int
    created_at: datetime


# Variantes cerradas: cada una lleva su tag en `kind` y se despacha por tag.
@dataclass(frozen=True)
class Success:
    stored: StoredFile
    kind: OutcomeKind = field(default=OutcomeKind.SUCCESS, init=False)


@dataclass(frozen=True)
class ValidationRejected:
    reason: str
    kind: OutcomeKind = field(default=OutcomeKind.VALIDATION_REJECTED, init=False)


@dataclass(frozen=True)
class SizeExceeded:
    limit: int
    kind: OutcomeKind = field(default=OutcomeKind.SIZE_EXCEEDED, init=False)


@dataclass(frozen=True)
class MalformedRequest:
    reason: str
    kind: OutcomeKind = field(default=OutcomeKind.MALFORMED_REQUEST, init=False)


@dataclass(frozen=True)
class Aborted:
    bytes_received: int = 0
    kind: OutcomeKind = field(default=OutcomeKind.ABORTED, init=False)


@dataclass(frozen=True)
class IOFailure:
    reason: str
    kind: OutcomeKind = field(default=OutcomeKind.IO_FAILURE, init=False)


UploadOutcome = Union[Success, ValidationRejected, SizeExceeded, MalformedRequest, Aborted, IOFailure]
