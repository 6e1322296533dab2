class RemoteQueryError(Exception):
    """A call to the remote store was rejected or never reached it.

    ``message`` is safe to show to a user; ``status`` is the HTTP status when
    the server answered, ``code`` the store's own error code when it sent one.
    """

    def __init__(self, message: str, *, status: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def __repr__(self) -> str:
        return f"RemoteQueryError({self.message!r}, status={self.status}, code={self.code})"
