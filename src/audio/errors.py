class AudioCueError(Exception):
    """Raised when a session start cue cannot be synthesized or played."""
