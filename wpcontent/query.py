"""wpcontent.query - fetch posts and media from the WordPress REST API.

Thin HTTP layer in front of the extractors.  Uses only the stdlib
(``urllib``) for HTTP.  Every ``fetch_*_from_*`` helper resolves a missing
post, a non-success response or an unusable payload to ``None``; only the
low-level :func:`fetch_json` raises.

Basic usage::

    from wpcontent.query import fetch_post_from_url

    post = fetch_post_from_url("https://michigandaily.com/news/some-story/")
    if post is not None:
        print(post.title, post.coauthors)
        print(post.image.src if post.image else "no featured image")

Cache busting::

    fetch_image_from_slug("diag-snow", use_cache=False)
"""

from __future__ import annotations

import gzip
import html
import json
import logging
import random
import time
import urllib.error
import urllib.request
import zlib
from datetime import UTC, datetime
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlparse, urlsplit, urlunsplit

from pydantic import ValidationError

from wpcontent import settings
from wpcontent.extractors.identifiers import join_names, slug_from_url
from wpcontent.extractors.image import ImageNotFoundError, extract_image
from wpcontent.items import Image, PostSummary, WordPressArticle, WordPressMedia

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public exception
# ---------------------------------------------------------------------------

class FetchError(RuntimeError):
    """Raised when a URL cannot be fetched or decoded.

    Attributes:
        url    -- the URL that failed
        status -- HTTP status code (0 if no response was received)
    """

    def __init__(
        self,
        message: str,
        url: str = "",
        status: int = 0,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body


def _decode_response_body(raw: bytes, headers: Any | None) -> str:
    encoding = ""
    if headers is not None:
        try:
            encoding = str(headers.get("Content-Encoding", "")).lower().strip()
        except Exception:
            encoding = ""

    if encoding == "gzip":
        raw = gzip.decompress(raw)
    elif encoding in ("deflate", "zlib"):
        raw = zlib.decompress(raw)

    charset = "utf-8"
    if headers is not None:
        try:
            charset = headers.get_content_charset("utf-8") or "utf-8"
        except Exception:
            charset = "utf-8"
    try:
        return raw.decode(charset, errors="replace")
    except (LookupError, ValueError):
        return raw.decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Low-level HTTP fetch
# ---------------------------------------------------------------------------

_RETRY_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


def fetch_json(
    url: str,
    *,
    timeout: int | None = None,
    user_agent: str | None = None,
    max_retries: int | None = None,
) -> Any:
    """GET *url* and return the decoded JSON body.

    With *max_retries* > 0, transient failures (429, 5xx, network errors) are
    retried with jittered exponential backoff.  It defaults to
    ``settings.MAX_RETRIES``, which is 0 (a single attempt) unless overridden.

    Raises:
        FetchError: On HTTP errors, connection failures, unsupported URL
                    schemes, or bodies that are not valid JSON.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise FetchError(f"Unsupported URL scheme: {parsed.scheme!r}", url=url)

    req = urllib.request.Request(
        url,
        headers={
            "User-Agent": user_agent or settings.USER_AGENT,
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
        },
    )
    effective_timeout = timeout or settings.DOWNLOAD_TIMEOUT
    if max_retries is None:
        max_retries = settings.MAX_RETRIES

    last_exc: FetchError | None = None
    for attempt in range(max_retries + 1):
        try:
            with urllib.request.urlopen(req, timeout=effective_timeout) as resp:
                raw: bytes = resp.read()
                try:
                    body = _decode_response_body(raw, resp.headers)
                except (OSError, zlib.error) as exc:
                    raise FetchError(
                        f"Decompression failed for {url}: {exc}", url=url,
                    ) from exc
        except urllib.error.HTTPError as exc:
            body_text = ""
            try:
                raw = exc.read()
                if raw:
                    body_text = _decode_response_body(raw, exc.headers)
            except Exception:
                body_text = ""
            last_exc = FetchError(
                f"HTTP {exc.code} fetching {url}: {exc.reason}",
                url=url,
                status=exc.code,
                body=body_text,
            )
            if exc.code in _RETRY_CODES and attempt < max_retries:
                delay = (2 ** attempt) + random.uniform(0, 1)
                logger.debug(
                    "HTTP %d for %s - retrying in %.1fs (attempt %d/%d)",
                    exc.code, url, delay, attempt + 1, max_retries,
                )
                time.sleep(delay)
                continue
            raise last_exc from exc
        except urllib.error.URLError as exc:
            last_exc = FetchError(f"URL error fetching {url}: {exc.reason}", url=url)
            if attempt < max_retries:
                delay = (2 ** attempt) + random.uniform(0, 1)
                logger.debug(
                    "URL error for %s - retrying in %.1fs (attempt %d/%d): %s",
                    url, delay, attempt + 1, max_retries, exc.reason,
                )
                time.sleep(delay)
                continue
            raise last_exc from exc
        except FetchError:
            raise
        except OSError as exc:
            last_exc = FetchError(f"Network error fetching {url}: {exc}", url=url)
            if attempt < max_retries:
                delay = (2 ** attempt) + random.uniform(0, 1)
                logger.debug(
                    "Network error for %s - retrying in %.1fs (attempt %d/%d): %s",
                    url, delay, attempt + 1, max_retries, exc,
                )
                time.sleep(delay)
                continue
            raise last_exc from exc

        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise FetchError(f"Invalid JSON from {url}: {exc}", url=url, body=body) from exc

    raise last_exc or FetchError(f"All retries exhausted for {url}", url=url)


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------

def _with_params(url: str, params: dict[str, str], *, use_cache: bool = True) -> str:
    """Append *params* to *url*; without *use_cache* add a cache-busting stamp."""
    params = dict(params)
    if not use_cache:
        params["time"] = datetime.now(UTC).isoformat()
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True) + list(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


def _first_item(
    url: str, timeout: int | None, max_retries: int | None,
) -> dict[str, Any] | None:
    """Fetch a REST collection and return its first element, or None."""
    try:
        payload = fetch_json(url, timeout=timeout, max_retries=max_retries)
    except FetchError as exc:
        logger.debug("Request failed for %s: %s", url, exc)
        return None
    if not isinstance(payload, list) or not payload:
        logger.debug("No results for %s", url)
        return None
    first = payload[0]
    if not isinstance(first, dict):
        logger.warning("Unexpected item type %s from %s", type(first).__name__, url)
        return None
    return first


def _image_from_media(
    payload: Any,
    *,
    full_caption: bool,
    lazy_load: bool,
) -> Image | None:
    try:
        media = WordPressMedia.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Unexpected media payload: %s", exc)
        return None
    try:
        return extract_image(
            media.description.rendered,
            full_caption=full_caption,
            lazy_load=lazy_load,
        )
    except ImageNotFoundError:
        logger.warning("Media description contains no <img> element")
        return None


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------

def _fetch_image(
    params: dict[str, str],
    *,
    full_caption: bool,
    use_cache: bool,
    lazy_load: bool,
    timeout: int | None,
    max_retries: int | None,
) -> Image | None:
    url = _with_params(
        f"{settings.WORDPRESS_API_URL}/media",
        {"media_type": "image", **params, "_fields": "description"},
        use_cache=use_cache,
    )
    item = _first_item(url, timeout, max_retries)
    if item is None:
        return None
    return _image_from_media(item, full_caption=full_caption, lazy_load=lazy_load)


def fetch_image_from_slug(
    slug: str,
    *,
    full_caption: bool = False,
    use_cache: bool = True,
    lazy_load: bool = True,
    timeout: int | None = None,
    max_retries: int | None = None,
) -> Image | None:
    """Look up an image attachment by slug and extract it."""
    return _fetch_image(
        {"slug": slug},
        full_caption=full_caption,
        use_cache=use_cache,
        lazy_load=lazy_load,
        timeout=timeout,
        max_retries=max_retries,
    )


def fetch_image_from_name(
    name: str,
    *,
    full_caption: bool = False,
    use_cache: bool = True,
    lazy_load: bool = True,
    timeout: int | None = None,
    max_retries: int | None = None,
) -> Image | None:
    """Search image attachments for *name* and extract the best match."""
    return _fetch_image(
        {"search": name},
        full_caption=full_caption,
        use_cache=use_cache,
        lazy_load=lazy_load,
        timeout=timeout,
        max_retries=max_retries,
    )


def fetch_image_from_url(
    url: str,
    *,
    full_caption: bool = False,
    use_cache: bool = True,
    lazy_load: bool = True,
    timeout: int | None = None,
    max_retries: int | None = None,
) -> Image | None:
    """Extract the image attachment whose page lives at *url*."""
    slug = slug_from_url(url)
    if slug is None:
        return None
    return fetch_image_from_slug(
        slug,
        full_caption=full_caption,
        use_cache=use_cache,
        lazy_load=lazy_load,
        timeout=timeout,
        max_retries=max_retries,
    )


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------

def fetch_post_from_slug(
    slug: str,
    *,
    use_test_site: bool = False,
    use_cache: bool = True,
    get_image: bool = True,
    image_full_caption: bool = False,
    image_lazy_load: bool = True,
    timeout: int | None = None,
    max_retries: int | None = None,
) -> PostSummary | None:
    """Fetch a post's link, title, byline and (optionally) featured image.

    Args:
        slug:               Post slug.
        use_test_site:      Query the staging site instead of production.
        use_cache:          When False, add a timestamp parameter so CDN
                            caches are bypassed.
        get_image:          Also fetch and extract the featured image.
        image_full_caption: Keep the featured image's caption markup.
        image_lazy_load:    Keep ``loading="lazy"`` on the image markup.
        timeout:            Per-request timeout in seconds.
        max_retries:        Extra attempts per request on transient failures.

    Returns:
        :class:`~wpcontent.items.PostSummary`, or None when no post matches
        or the API does not answer successfully.
    """
    api = settings.TEST_SITE_API_URL if use_test_site else settings.WORDPRESS_API_URL
    url = _with_params(
        f"{api}/posts",
        {"slug": slug, "_fields": "coauthors,link,title,_links"},
        use_cache=use_cache,
    )
    item = _first_item(url, timeout, max_retries)
    if item is None:
        return None

    try:
        story = WordPressArticle.model_validate(item)
    except ValidationError as exc:
        logger.warning("Unexpected post payload for slug %r: %s", slug, exc)
        return None

    image: Image | None = None
    if get_image and story.links.featured_media:
        media_url = _with_params(
            story.links.featured_media[0].href,
            {"_fields": "description"},
            use_cache=use_cache,
        )
        try:
            media = fetch_json(media_url, timeout=timeout, max_retries=max_retries)
        except FetchError as exc:
            logger.debug("Featured media request failed for %s: %s", media_url, exc)
        else:
            image = _image_from_media(
                media, full_caption=image_full_caption, lazy_load=image_lazy_load,
            )

    return PostSummary(
        url=story.link,
        title=html.unescape(story.title.rendered),
        coauthors=join_names(author.display_name for author in story.coauthors),
        image=image,
    )


def fetch_post_from_url(
    url: str,
    *,
    use_test_site: bool = False,
    use_cache: bool = True,
    get_image: bool = True,
    image_full_caption: bool = False,
    image_lazy_load: bool = True,
    timeout: int | None = None,
    max_retries: int | None = None,
) -> PostSummary | None:
    """Fetch the post whose permalink is *url*.  See :func:`fetch_post_from_slug`."""
    slug = slug_from_url(url)
    if slug is None:
        return None
    return fetch_post_from_slug(
        slug,
        use_test_site=use_test_site,
        use_cache=use_cache,
        get_image=get_image,
        image_full_caption=image_full_caption,
        image_lazy_load=image_lazy_load,
        timeout=timeout,
        max_retries=max_retries,
    )
