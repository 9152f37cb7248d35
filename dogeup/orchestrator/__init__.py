"""Orchestrator package - coordinates upload runs."""
from .core import UploadOrchestrator
from .file_collector import FileCollector
from .keys import derive_key
from .models import FileEntry, RunResult

__all__ = ["UploadOrchestrator", "FileCollector", "derive_key", "FileEntry", "RunResult"]
