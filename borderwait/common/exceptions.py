class BorderWaitError(Exception):
    """Base exception for the service layers around the aggregation core."""
    pass

class ConfigurationError(BorderWaitError):
    """Raised when configuration is invalid."""
    pass

class RepositoryError(BorderWaitError):
    """Raised when the vote store cannot be read or written."""
    pass

class UnknownCheckpointError(BorderWaitError):
    """Raised when a checkpoint id is not in the configured registry."""

    def __init__(self, checkpoint_id: str):
        super().__init__(f"Unknown checkpoint: {checkpoint_id}")
        self.checkpoint_id = checkpoint_id

class CooldownActiveError(BorderWaitError):
    """Raised when a device votes again for a checkpoint before its cooldown expired."""

    def __init__(self, checkpoint_id: str, seconds_left: int):
        super().__init__(f"Vote for {checkpoint_id} not allowed yet, retry in {seconds_left}s")
        self.checkpoint_id = checkpoint_id
        self.seconds_left = seconds_left
