"""
Service Layer

Host-side collaborators: files, git, diagnostics and the config file.
"""

from bitcodefixer.services.file_service import FileService
from bitcodefixer.services.git_service import GitService
from bitcodefixer.services.config_service import ConfigService
from bitcodefixer.services.diagnostics_service import (
    DiagnosticsSource,
    StaticDiagnostics,
    ESLintDiagnostics,
    TypeScriptDiagnostics,
    CompositeDiagnostics,
)

__all__ = [
    "FileService",
    "GitService",
    "ConfigService",
    "DiagnosticsSource",
    "StaticDiagnostics",
    "ESLintDiagnostics",
    "TypeScriptDiagnostics",
    "CompositeDiagnostics",
]
