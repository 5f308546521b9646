"""Public interface definitions for external collaborators.

Network access is reached only through the abstract base classes in this
package.  Concrete adapters live in ``src/providers/`` and are injected into
the services, so tests can hand the services a mock provider and the
transcript extractor never depends on how a page was obtained.

CONCRETE PROVIDER MAP:
    Interface            →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────
    IArchiveProvider     →  JArchiveProvider

Re-exports
----------
IArchiveProvider
    Page retrieval contract (game transcripts, season listings).
"""

from src.interfaces.archive_provider import IArchiveProvider

__all__ = [
    "IArchiveProvider",
]
