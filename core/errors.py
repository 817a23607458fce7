"""
core/errors.py

Exceptions raised by motionwatch before or around the detection loop.

Once the loop is running with a validated config and an open source,
no per-frame errors are expected; everything here is raised during
setup and handled by core/cli.py.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class MotionWatchError(Exception):
    """Base exception for all motionwatch errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(MotionWatchError):
    """Configuration is malformed or out of range. The pipeline never starts."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            error_code="CONFIG_INVALID",
            details=details,
        )


class SourceOpenError(MotionWatchError):
    """Camera or video file could not be opened."""

    def __init__(self, source: Any) -> None:
        super().__init__(
            message=f"Failed to open video source: {source}",
            error_code="SOURCE_OPEN_FAILED",
            details={"source": str(source)},
        )


class SnapshotDirectoryError(MotionWatchError):
    """Snapshot directory could not be created."""

    def __init__(self, directory: Any, reason: str) -> None:
        super().__init__(
            message=f"Failed to create snapshot directory '{directory}': {reason}",
            error_code="SNAPSHOT_DIR_FAILED",
            details={"directory": str(directory), "reason": reason},
        )
