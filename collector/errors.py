# collector/errors.py


class MonitorError(Exception):
    """Base error for the container stats monitor."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StartupError(MonitorError):
    """The engine client could not be created."""


class EngineUnreachableError(MonitorError):
    """Listing running containers failed; the whole poll is lost."""


class PerContainerSampleError(MonitorError):
    """Fetching or decoding one container's stats failed."""

    def __init__(self, container_id: str, message: str):
        super().__init__(message)
        self.container_id = container_id
