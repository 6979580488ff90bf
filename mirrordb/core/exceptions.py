"""
Exceptions raised by the mirror.
"""


class MirrorError(Exception):
    """Base class for mirror errors"""
    pass


class SchemaLockedError(MirrorError):
    """Collection declared after the mirror was opened"""
    pass


class MirrorNotReadyError(MirrorError):
    """Mirror is closed or has not finished its initial load"""
    pass


class UnknownCollectionError(MirrorError, KeyError):
    """Collection was neither declared nor found in the store"""
    pass


class RecordNotFoundError(MirrorError, KeyError):
    """No record with the given key"""
    pass


class CapabilityError(MirrorError, AttributeError):
    """Operation is not available on a derived result"""
    pass


class SyncTimeoutError(MirrorError, TimeoutError):
    """Initial load did not finish in time"""
    pass


class PersistenceError(MirrorError):
    """A background write to the store failed."""

    def __init__(self, operation: str, collection: str, cause: BaseException):
        super().__init__(f"{operation} on '{collection}' failed: {cause}")
        self.operation = operation
        self.collection = collection
        self.cause = cause


class MissingKeyError(MirrorError, ValueError):
    """Record has no key and the collection does not auto-increment"""
    pass
