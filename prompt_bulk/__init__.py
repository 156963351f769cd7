"""Prompt Bulk: expand {{placeholder}} templates into batches of prompts."""

__version__ = "0.1.0"
