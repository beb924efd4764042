# src/querystash/core/page_data.py
"""Output locations for query results and built page-data.

Layout under the site root:
    .cache/json/<identity with "/" -> "_">.json    staged page results
    public/page-data/<page path>/page-data.json    built page-data (promoted)
    public/page-data/sq/d/<query hash>.json        non-page (static query) results
"""

from pathlib import Path


def fixed_page_path(page_path: str) -> str:
    """Directory name used for a page under public/page-data ("/" -> "index")."""
    if page_path == "/":
        return "index"
    return page_path


def page_data_path(public_dir: Path, page_path: str) -> Path:
    """Built page-data.json location for a page."""
    return public_dir / "page-data" / fixed_page_path(page_path).lstrip("/") / "page-data.json"


def page_data_exists(public_dir: Path, page_path: str) -> bool:
    """Whether a page's built page-data.json is present on disk."""
    return page_data_path(public_dir, page_path).exists()


def staged_result_path(cache_dir: Path, identity: str) -> Path:
    """Staging file for a page query result, flattened to one directory."""
    return cache_dir / "json" / f"{identity.replace('/', '_')}.json"


def static_query_result_path(public_dir: Path, query_hash: str) -> Path:
    """Final, content-addressed file for a non-page query result."""
    return public_dir / "page-data" / "sq" / "d" / f"{query_hash}.json"
