"""Application-level contracts."""
