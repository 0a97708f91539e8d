"""
Engine - A named URL template plus its term-normalization rule.

Example engine:
    name        = "ddg"
    url_pattern = "https://duckduckgo.com/?q={q}"
    pattern     = "{q}"
    regex       = "\\s+"
    replacement = "+"

Searching "hello world" opens https://duckduckgo.com/?q=hello+world
"""

import uuid
from dataclasses import asdict, dataclass

from loguru import logger

from termsearch.search.resolver import resolve

ENGINE_FIELDS = ("id", "name", "url_pattern", "pattern", "regex", "replacement")


@dataclass(frozen=True)
class Engine:
    """A single configured search provider."""
    id: str
    name: str
    url_pattern: str
    pattern: str
    regex: str
    replacement: str

    @classmethod
    def create(
        cls,
        name: str,
        url_pattern: str,
        pattern: str,
        regex: str,
        replacement: str,
    ) -> "Engine":
        """
        Create a new engine with a freshly generated id.

        Args:
            name: Human-readable label
            url_pattern: URL template containing the placeholder
            pattern: Literal placeholder token inside url_pattern
            regex: Expression applied to the raw search term
            replacement: Text substituted for every regex match

        Returns:
            Engine with a random UUID4 id
        """
        logger.info(f"Creating engine '{name}'")
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            url_pattern=url_pattern,
            pattern=pattern,
            regex=regex,
            replacement=replacement,
        )

    def url(self, term: str) -> str:
        """Resolve a search term into the URL to open."""
        return resolve(self, term)

    def to_dict(self) -> dict:
        return asdict(self)
