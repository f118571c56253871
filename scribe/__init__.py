"""Scribe: audio upload, AssemblyAI transcription and per-account history."""

__version__ = "1.0.0"
