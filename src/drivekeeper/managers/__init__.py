"""Lifecycle manager exports for drivekeeper."""

from __future__ import annotations

from .base import RecordManager
from .file_manager import FileManager
from .folder_manager import FolderManager

__all__ = ["RecordManager", "FileManager", "FolderManager"]
