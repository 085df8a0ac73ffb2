"""Error taxonomy for lead discovery sessions."""


class PreconditionError(ValueError):
    """Raised when a session is started with a malformed box or no categories."""


class ProviderCallError(RuntimeError):
    """Raised by place search providers when a single nearby search fails."""


class SessionAbortedError(Exception):
    """Signals that cancellation was requested; the session ends normally."""
