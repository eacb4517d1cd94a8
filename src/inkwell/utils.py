import re


def slugify(text: str) -> str:
    """
    Convert text to a URL-safe slug.

    Lowercases, replaces whitespace and underscores with hyphens and drops
    anything that is not alphanumeric ("Hello, World_2" -> "hello-world-2").
    """
    slug = text.lower()
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    return re.sub(r"-+", "-", slug).strip("-")
