"""Runtime configuration for drivekeeper."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from drivekeeper.errors import ValidationError
from drivekeeper.util.mime import ALLOWED_CONTENT_TYPES, MAX_UPLOAD_BYTES

_ENV_PREFIX = "DRIVEKEEPER_"


@dataclass(slots=True, frozen=True)
class DriveKeeperConfig:
    """
    Connection settings for the tabular store and the blob store.

    Required:
        - supabase_url / supabase_key
        - cloudinary_cloud_name / cloudinary_api_key / cloudinary_api_secret
    """

    supabase_url: str
    supabase_key: str
    cloudinary_cloud_name: str
    cloudinary_api_key: str
    cloudinary_api_secret: str

    upload_folder: str = "drive"
    files_table: str = "files"
    folders_table: str = "folders"
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    progress_grace_seconds: float = 1.0
    allowed_content_types: frozenset[str] = field(
        default_factory=lambda: frozenset(ALLOWED_CONTENT_TYPES)
    )

    def __post_init__(self) -> None:
        for key in (
            "supabase_url",
            "supabase_key",
            "cloudinary_cloud_name",
            "cloudinary_api_key",
            "cloudinary_api_secret",
            "files_table",
            "folders_table",
        ):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"DriveKeeperConfig.{key} must be a non-empty string")

        if self.max_upload_bytes <= 0:
            raise ValidationError("DriveKeeperConfig.max_upload_bytes must be positive")
        if self.progress_grace_seconds < 0:
            raise ValidationError("DriveKeeperConfig.progress_grace_seconds must be >= 0")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DriveKeeperConfig":
        """
        Build config from DRIVEKEEPER_* environment variables.

        Raises:
            ValidationError: if a required variable is missing or malformed.
        """
        env = os.environ if environ is None else environ

        def required(name: str) -> str:
            value = env.get(_ENV_PREFIX + name, "").strip()
            if not value:
                raise ValidationError(
                    f"Missing env var: {_ENV_PREFIX}{name}",
                    details={"env_var": _ENV_PREFIX + name},
                )
            return value

        optional: dict[str, object] = {}
        if env.get(_ENV_PREFIX + "UPLOAD_FOLDER", "").strip():
            optional["upload_folder"] = env[_ENV_PREFIX + "UPLOAD_FOLDER"].strip()
        if env.get(_ENV_PREFIX + "FILES_TABLE", "").strip():
            optional["files_table"] = env[_ENV_PREFIX + "FILES_TABLE"].strip()
        if env.get(_ENV_PREFIX + "FOLDERS_TABLE", "").strip():
            optional["folders_table"] = env[_ENV_PREFIX + "FOLDERS_TABLE"].strip()

        raw_max = env.get(_ENV_PREFIX + "MAX_UPLOAD_BYTES", "").strip()
        if raw_max:
            if not raw_max.isdigit():
                raise ValidationError(
                    f"{_ENV_PREFIX}MAX_UPLOAD_BYTES must be an integer",
                    details={"value": raw_max},
                )
            optional["max_upload_bytes"] = int(raw_max)

        return cls(
            supabase_url=required("SUPABASE_URL"),
            supabase_key=required("SUPABASE_KEY"),
            cloudinary_cloud_name=required("CLOUDINARY_CLOUD_NAME"),
            cloudinary_api_key=required("CLOUDINARY_API_KEY"),
            cloudinary_api_secret=required("CLOUDINARY_API_SECRET"),
            **optional,  # type: ignore[arg-type]
        )
