"""
Rewriting of git URLs embedded in text so they point at the internal mirror.

Every ``http(s)://.../<something>.git`` URL is replaced by
``<host>/<push user>/<mirror name>`` where the mirror name is derived from the
full upstream URL. URLs that already live under the push user are left alone,
so running the rewrite on its own output changes nothing.
"""

import logging
import re

from airgap_mirror.core.config import DEFAULT_PUSH_USER

# Configure logging
logger = logging.getLogger(__name__)

# A URL never spans lines
GIT_URL_PATTERN = re.compile(r"https?://[^/\n]+/(.*\.git)")
REPO_NAME_SEPARATOR = "__"
REPO_NAME_PREFIX = "mirror"

_SEPARATOR_RUNS = re.compile(r"(https?://|[^\w\-.])+", re.ASCII)


def transform_url_to_repo_name(url: str) -> str:
    """
    Derive the mirror repository name for an upstream URL.

    Args:
        url: Upstream repository URL

    Returns:
        Name such as ``mirror__github.com__org__repo.git``
    """
    return REPO_NAME_PREFIX + _SEPARATOR_RUNS.sub(REPO_NAME_SEPARATOR, url)


def transform_url(base_url: str, url: str, push_user: str = DEFAULT_PUSH_USER) -> str:
    """Build the mirror URL for ``url`` on the mirror host ``base_url``."""
    replaced = transform_url_to_repo_name(url)
    output = "%s/%s/%s" % (base_url, push_user, replaced)
    logger.debug("Rewrite git URL: %s -> %s", url, output)
    return output


def mutate_git_urls_in_text(host: str, text: str, push_user: str = DEFAULT_PUSH_USER) -> str:
    """
    Rewrite every git URL found in ``text`` to its mirror location.

    Args:
        host: Base URL of the mirror host (e.g. "http://127.0.0.1:3000")
        text: Arbitrary text, e.g. the contents of a manifest file
        push_user: Namespace the mirrors are pushed under

    Returns:
        The text with all non-mirrored git URLs replaced
    """

    def _replace(match: "re.Match[str]") -> str:
        url = match.group(0)
        if push_user in url:
            logger.warning("%s seems to have been previously patched.", url)
            return url
        return transform_url(host, url, push_user)

    return GIT_URL_PATTERN.sub(_replace, text)
