from utils.errors import RemoteServiceError


class RemoteResult:
    """Outcome of one call to an external store.

    Adapters never raise for remote failures; they hand back a failed result
    and the caller decides how the failure composes with the rest of its
    sequence.
    """

    __slots__ = ('operation', 'ok', 'value', 'error')

    def __init__(self, operation, ok, value=None, error=None):
        self.operation = operation
        self.ok = ok
        self.value = value
        self.error = error

    @classmethod
    def success(cls, operation, value=None):
        return cls(operation, True, value=value)

    @classmethod
    def failure(cls, operation, error):
        return cls(operation, False, error=error)

    def unwrap(self):
        """Return the value, or raise RemoteServiceError for a failed call"""
        if not self.ok:
            raise RemoteServiceError(self.operation, cause=self.error)
        return self.value

    def __repr__(self):
        state = 'ok' if self.ok else f'failed: {self.error}'
        return f"<RemoteResult {self.operation} {state}>"
