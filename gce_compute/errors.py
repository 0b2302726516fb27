"""Exceptions raised while building an authenticated compute client."""


class GceComputeError(Exception):
    """Base class for every error raised by gce_compute."""


class TransportInitError(GceComputeError):
    """The secure HTTP transport could not be constructed."""


class CredentialExchangeError(GceComputeError):
    """Exchanging the ambient identity for an access token failed."""


class ClientBuildError(GceComputeError):
    """The compute client could not be built from transport and credential."""


class CredentialError(GceComputeError):
    """A refresh of the cached compute client failed.

    Wraps whichever collaborator failed. ``kind`` is the class name of the
    original exception and ``message`` its text; the original is also
    chained as ``__cause__``.
    """

    def __init__(self, kind: str, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"unable to obtain compute client: {kind}: {message}")

    @classmethod
    def wrap(cls, exc: BaseException) -> "CredentialError":
        return cls(type(exc).__name__, str(exc))
