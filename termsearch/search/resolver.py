"""
Resolver - Turn a raw search term into a concrete URL.

Resolution happens in two stages:
  1. Every match of engine.regex inside the term is replaced with
     engine.replacement (back-references like \\1 are allowed). The
     result is the "treated" string.
  2. Every literal occurrence of engine.pattern inside engine.url_pattern
     is replaced with the treated string.

The pattern is always matched literally and the treated string is
inserted verbatim, so regex metacharacters in either never leak into
the URL template.
"""

import re

from loguru import logger

from termsearch.errors import PatternError

# Raised by re for oversized repeats and deeply nested groups
REGEX_ERRORS = (re.error, OverflowError, RecursionError)


def treat_term(regex: str, replacement: str, term: str) -> str:
    """
    Normalize a search term with the engine's regex rule.

    Args:
        regex: Regular expression matched against the term
        replacement: Substitution template for each match
        term: Raw search term (may be empty)

    Returns:
        The treated string

    Raises:
        PatternError: If the regex or the replacement template is invalid
    """
    try:
        compiled = re.compile(regex)
    except REGEX_ERRORS as e:
        logger.error(f"Invalid engine regex {regex!r}: {e}")
        raise PatternError(f"Invalid regex {regex!r}: {e}") from e

    try:
        return compiled.sub(replacement, term)
    except REGEX_ERRORS + (IndexError,) as e:
        logger.error(f"Invalid replacement {replacement!r}: {e}")
        raise PatternError(f"Invalid replacement {replacement!r}: {e}") from e


def fill_template(url_pattern: str, pattern: str, treated: str) -> str:
    """
    Insert the treated string at every literal occurrence of pattern.

    An empty pattern matches at every position, so the treated string
    lands between every character of url_pattern.
    """
    try:
        placeholder = re.compile(re.escape(pattern))
    except REGEX_ERRORS as e:
        logger.error(f"Unable to compile placeholder {pattern!r}: {e}")
        raise PatternError(f"Invalid placeholder {pattern!r}: {e}") from e

    # Function replacement keeps backslashes in the term literal
    return placeholder.sub(lambda _match: treated, url_pattern)


def resolve(engine, term: str) -> str:
    """
    Resolve a search term into a URL using an engine definition.

    Args:
        engine: Any object with url_pattern, pattern, regex and replacement
        term: Raw search term

    Returns:
        The final URL

    Raises:
        PatternError: If the engine's expressions cannot be applied
    """
    treated = treat_term(engine.regex, engine.replacement, term)
    logger.debug(f"Treated term {term!r} -> {treated!r}")

    url = fill_template(engine.url_pattern, engine.pattern, treated)
    logger.info(f"Url generated: {url}")
    return url
