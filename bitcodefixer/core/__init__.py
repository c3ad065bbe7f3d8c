
# Core modules
from .errors import (
    BitCodeFixerError,
    ConfigLoadError,
    UpstreamError,
    EmptyFixError,
    EmptyMessageError,
    NotARepoError,
    NoStagedChangesError,
    CommitExecError,
)
from .models import Position, Range, Diagnostic, FixRequest, BatchResult

__all__ = [
    "BitCodeFixerError",
    "ConfigLoadError",
    "UpstreamError",
    "EmptyFixError",
    "EmptyMessageError",
    "NotARepoError",
    "NoStagedChangesError",
    "CommitExecError",
    "Position",
    "Range",
    "Diagnostic",
    "FixRequest",
    "BatchResult",
]
