"""Single-session Discord playback orchestrator with an idle home channel."""

__version__ = "0.1.0"
