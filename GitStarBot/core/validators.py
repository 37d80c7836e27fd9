"""
Parsing and validation of repository identifiers and tokens.
"""

import logging
import re
from typing import Iterable, List, Optional

from core.entities import RepositoryRef

logger = logging.getLogger(__name__)

GITHUB_URL_PATTERN = re.compile(r"github\.com/(?P<owner>[^/]+)/(?P<name>[^/?#]+)")

TOKEN_PREFIXES = ("ghp_", "gho_", "ghu_", "ghs_", "ghr_", "github_pat_")
MIN_TOKEN_LENGTH = 40


def parse_repository(raw) -> Optional[RepositoryRef]:
    """
    Parse an ``owner/name`` string or a GitHub URL.

    Args:
        raw: Identifier such as ``octocat/hello-world`` or
            ``https://github.com/octocat/hello-world.git``

    Returns:
        RepositoryRef if the input is valid, None otherwise
    """
    if not isinstance(raw, str):
        return None

    value = raw.strip()
    if not value:
        return None

    if "github.com" in value:
        match = GITHUB_URL_PATTERN.search(value)
        if match:
            name = re.sub(r"\.git$", "", match.group("name"))
            if not name:
                return None
            return RepositoryRef(owner=match.group("owner"), name=name)

    parts = value.split("/")
    if len(parts) == 2 and parts[0] and parts[1]:
        return RepositoryRef(owner=parts[0], name=parts[1])

    return None


def validate_repositories(
    repositories: Iterable[str],
    log: Optional[logging.Logger] = None,
) -> List[RepositoryRef]:
    """
    Keep the valid identifiers in input order, warning about the rest.

    Args:
        repositories: Raw identifiers from the configuration
        log: Logger used for the warnings (defaults to this module's logger)

    Returns:
        List of parsed identifiers
    """
    log = log or logger
    valid = []

    for raw in repositories:
        ref = parse_repository(raw)
        if ref is None:
            log.warning(f"Ignoring invalid repository: {raw!r}")
            continue
        valid.append(ref)

    log.info(f"{len(valid)} valid repositories found")
    return valid


def looks_like_github_token(token) -> bool:
    """Heuristic check of the personal access token format."""
    if not token or not isinstance(token, str):
        return False
    return token.startswith(TOKEN_PREFIXES) and len(token) >= MIN_TOKEN_LENGTH
