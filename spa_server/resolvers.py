"""Request resolvers: exact static files first, then the SPA entry document.

Each resolver takes the request and the active settings and returns either a
response or ``None`` when it has nothing to serve. The route runs them in
order and the first response wins.
"""

import logging
import mimetypes
import os
import stat
from pathlib import Path
from typing import Callable, Optional, Sequence

from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.responses import FileResponse, Response
from starlette.staticfiles import NotModifiedResponse, StaticFiles

from spa_server.config import Settings

logger = logging.getLogger(__name__)

Resolver = Callable[[Request, Settings], Optional[Response]]

ONE_YEAR_SECONDS = 31536000

# Fingerprinted by the client build, so never revalidated
IMMUTABLE_EXTENSIONS = frozenset(
    {".js", ".css", ".png", ".jpg", ".jpeg", ".gif", ".svg", ".ico"}
)

DEFAULT_CACHE_CONTROL = f"public, max-age={ONE_YEAR_SECONDS}"
IMMUTABLE_CACHE_CONTROL = f"public, max-age={ONE_YEAR_SECONDS}, immutable"


def cache_control_for(path: Path) -> str:
    """Return the Cache-Control value for a static file."""
    if path.suffix.lower() in IMMUTABLE_EXTENSIONS:
        return IMMUTABLE_CACHE_CONTROL
    return DEFAULT_CACHE_CONTROL


def _regular_file_stat(path: Path) -> Optional[os.stat_result]:
    """Stat ``path``, returning None unless it is an existing regular file."""
    try:
        st = path.stat()
    except (FileNotFoundError, NotADirectoryError, ValueError):
        return None
    if not stat.S_ISREG(st.st_mode):
        return None
    return st


# Only used for its conditional-request check; never serves anything itself
_conditional = StaticFiles(check_dir=False)


def is_not_modified(response_headers: Headers, request_headers: Headers) -> bool:
    """
    Check the request's validators against the file's ETag / Last-Modified.

    Matching is Starlette's; on top of it ``If-None-Match: *`` always
    matches, and If-Modified-Since is ignored when entity tags were sent.
    """
    if_none_match = request_headers.get("if-none-match")
    if if_none_match is not None:
        if if_none_match.strip() == "*":
            return True
        request_headers = Headers(
            raw=[(k, v) for k, v in request_headers.raw if k.lower() != b"if-modified-since"]
        )
    return _conditional.is_not_modified(response_headers, request_headers)


def resolve_static_file(request: Request, settings: Settings) -> Optional[Response]:
    """Serve the file under the asset root that exactly matches the request path."""
    root = settings.DIST_DIR
    relative = request.url.path.lstrip("/")
    if not relative:
        return None

    try:
        candidate = (root / relative).resolve()
    except (OSError, ValueError):
        return None

    # Reject anything that escapes the asset root (../, symlinks)
    if not candidate.is_relative_to(root):
        logger.warning(f"Blocked path outside asset root: {request.url.path}")
        return None

    st = _regular_file_stat(candidate)
    if st is None:
        return None

    media_type, _ = mimetypes.guess_type(candidate.name)
    response = FileResponse(
        candidate,
        media_type=media_type or "application/octet-stream",
        stat_result=st,
        headers={"Cache-Control": cache_control_for(candidate)},
    )

    if request.method in ("GET", "HEAD") and is_not_modified(
        response.headers, request.headers
    ):
        return NotModifiedResponse(response.headers)
    return response


def resolve_entry_document(request: Request, settings: Settings) -> Optional[Response]:
    """Serve index.html for any unmatched route so the client router can take over."""
    index_path = settings.index_path
    st = _regular_file_stat(index_path)
    if st is None:
        return None
    return FileResponse(index_path, media_type="text/html", stat_result=st)


DEFAULT_RESOLVERS: Sequence[Resolver] = (resolve_static_file, resolve_entry_document)


def resolve(
    request: Request,
    settings: Settings,
    resolvers: Sequence[Resolver] = DEFAULT_RESOLVERS,
) -> Optional[Response]:
    """Run the resolvers in order and return the first response produced."""
    for resolver in resolvers:
        response = resolver(request, settings)
        if response is not None:
            return response
    return None
