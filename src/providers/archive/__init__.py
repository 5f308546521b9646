"""Archive retrieval providers.

JArchiveProvider implements IArchiveProvider over httpx: it fetches game
transcripts and season listings from j-archive.com and hands back parsed
BeautifulSoup documents.  Swap in another implementation (e.g. one reading
saved pages from disk) without touching the scrape services.
"""

from src.providers.archive.jarchive_provider import JArchiveProvider

__all__ = ["JArchiveProvider"]
