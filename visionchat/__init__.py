"""Vision chat: recruiting bot widget backed by a streaming completion relay."""

__version__ = "1.0.0"
