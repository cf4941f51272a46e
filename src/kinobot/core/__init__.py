"""Core lookup pipeline: assembly, color extraction and scheduling."""
