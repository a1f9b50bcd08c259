"""Error hierarchy for the diagnostics collector."""

from __future__ import annotations


class CollectorError(Exception):
    """Base class for every error raised by the collector."""


class CredentialsError(CollectorError):
    """No kubeconfig could be resolved from flags or environment."""


class ClientSetupError(CollectorError):
    """The kubernetes client could not be constructed from the kubeconfig."""


class FilesystemError(CollectorError):
    """A bundle directory could not be created."""


class NamespaceNotFoundError(CollectorError):
    """No namespace was supplied and the marker service was not found."""


class ClusterAPIError(CollectorError):
    """A call against the cluster (API request or kubectl process) failed."""

    def __init__(self, reason: str, status: int | None = None, body: str = "") -> None:
        self.reason = reason
        self.status = status
        self.body = body
        detail = f"{reason}: {body.strip()}" if body and body.strip() else reason
        if status is not None:
            detail = f"({status}) {detail}"
        super().__init__(detail)


class ListError(CollectorError):
    """Listing the instances of one resource kind failed."""

    def __init__(self, kind: str, namespace: str, message: str) -> None:
        self.kind = kind
        self.namespace = namespace
        super().__init__(f"error listing {kind} in namespace {namespace}: {message}")


class FetchError(CollectorError):
    """Retrieving one artifact for one resource instance failed."""

    def __init__(self, kind: str, name: str, artifact: str, message: str) -> None:
        self.kind = kind
        self.name = name
        self.artifact = artifact
        super().__init__(f"error fetching {artifact} of {kind}/{name}: {message}")


class LogFetchError(FetchError):
    """Retrieving container logs failed for a reason other than a missing previous instance."""


class WriteError(CollectorError):
    """Persisting an artifact to the bundle failed."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"error writing {path}: {message}")
