from typing import List, Optional


class ChannelGraphError(Exception):
    """Base class for every error raised by channel_graph."""


class TopologyValidationError(ChannelGraphError):
    """The topology description has the wrong shape or breaks a uniqueness rule."""

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        self.problems = list(problems or [])
        if self.problems:
            message = message + ":\n" + "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(message)


class LayoutEngineError(ChannelGraphError):
    """A layout engine could not produce a usable response."""
