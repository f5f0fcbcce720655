"""Command-line interface for claude-session-index."""
