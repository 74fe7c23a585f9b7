"""Repository full-name utilities.

GitHub reports repositories with a ``full_name`` of the form ``owner/repo``.
These are URL path segments, not filesystem paths, so they are split here
rather than with ``pathlib``.
"""

from __future__ import annotations


def repo_slug(owner: str, name: str) -> str:
    """Build a ``owner/repo`` full name.

    Examples
    --------
    >>> repo_slug("octocat", "Hello-World")
    'octocat/Hello-World'

    """
    return f"{owner}/{name}"


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Split a repository full name into owner and repository name.

    Parameters
    ----------
    slug:
        Repository full name in ``owner/repo`` format.

    Returns
    -------
    tuple[str, str]
        ``(owner, repo)``.

    Raises
    ------
    ValueError
        If ``slug`` does not consist of exactly two non-empty segments.

    Examples
    --------
    >>> parse_repo_slug("octocat/Hello-World")
    ('octocat', 'Hello-World')

    """
    parts = slug.split("/")
    if len(parts) != 2 or not all(parts):  # noqa: PLR2004
        msg = f"Invalid repository full name: expected 'owner/repo', got {slug!r}"
        raise ValueError(msg)

    owner, name = parts
    return owner, name
