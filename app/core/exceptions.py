"""Domain errors shared by services, routes and the CLI."""


class TutorSchedulerError(Exception):
    """Base class for all application errors."""


class ValidationError(TutorSchedulerError):
    """Required input is missing or invalid; the operation was not attempted."""


class StorageError(TutorSchedulerError):
    """The local store is unavailable or rejected the operation."""


class RecordNotFoundError(StorageError):
    """No record with the given id exists in the collection."""

    def __init__(self, collection: str, record_id: int):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{collection} record {record_id} not found")


class FormatError(TutorSchedulerError):
    """Backup document is malformed or has an unsupported version."""
