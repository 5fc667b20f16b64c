"""Activity logging package."""

from fiado.audit.logger import ActivityLogger, configure_logging

__all__ = ["ActivityLogger", "configure_logging"]
