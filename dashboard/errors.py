class DeletionBlocked(Exception):
    """A record cannot be deleted while dependent rows exist."""

    def __init__(self, message):
        self.message = message
        super().__init__(message)
