"""Service layer helpers for external integrations."""

from .assemblyai import AssemblyAIClient
from .staging import (
    discard_file,
    ensure_staging_dir,
    generate_staging_name,
    staged_file,
    write_staged_upload,
)

__all__ = [
    "AssemblyAIClient",
    "discard_file",
    "ensure_staging_dir",
    "generate_staging_name",
    "staged_file",
    "write_staged_upload",
]
