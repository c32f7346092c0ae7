"""Discovery-mode diagnostic output"""

from .file_sink import FileDiagnosticSink, LoggingDiagnosticSink

__all__ = [
    "FileDiagnosticSink",
    "LoggingDiagnosticSink",
]
