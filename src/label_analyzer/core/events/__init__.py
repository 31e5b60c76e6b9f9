"""Application lifecycle events."""

from label_analyzer.core.events.lifespan import lifespan


__all__ = ["lifespan"]
