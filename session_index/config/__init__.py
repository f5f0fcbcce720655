"""Settings for claude-session-index."""
