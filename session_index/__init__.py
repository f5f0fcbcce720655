"""Discovery, indexing and search of Claude Code session transcripts."""
