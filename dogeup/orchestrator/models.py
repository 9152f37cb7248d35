"""Orchestrator data models."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List
from ..models import RunState, UploadOutcome


@dataclass(frozen=True)
class FileEntry:
    """Regular file discovered under the upload root."""
    absolute_path: Path
    relative_path: Path


@dataclass
class RunResult:
    """Result of one orchestrator run."""
    state: RunState
    total_files: int = 0
    uploaded: List[UploadOutcome] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.state == RunState.DONE

    @property
    def uploaded_files(self) -> int:
        return len(self.uploaded)

    @property
    def message(self) -> Optional[str]:
        if self.error is None:
            return None
        return str(self.error) or type(self.error).__name__
