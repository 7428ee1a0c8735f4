"""Background tasks run on the host's scheduler."""

from onepace.tasks.update import MetadataUpdateTask

__all__ = ["MetadataUpdateTask"]
