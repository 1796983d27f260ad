"""Remote stream service clients."""

from auditstream.remote.base import RemoteStreamClient
from auditstream.remote.github import GitHubAuditStreamClient

__all__ = [
    "RemoteStreamClient",
    "GitHubAuditStreamClient",
]
