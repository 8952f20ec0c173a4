"""
Design content with cache-aside lookups.

Ads, analytics code, custom CSS/JS and static file lists are read from the
cache first; on a miss (or expiry) they are loaded from the database, stored
in the cache and returned. Empty results are cached like any other payload,
so a slot with no matching row does not hit the database again until expiry.

Database errors are not caught here: they propagate to the request handler.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from app import crud
from app.cache import Cache, ContentKind, get_cache, get_ttl_for_kind, make_cache_key
from app.render import FileType, RequestContext, render_ad, render_files
from config.settings import settings

logger = logging.getLogger("design")


# Storage read for each content kind, called with (db, *params)
LOADERS: Dict[ContentKind, Callable[..., Any]] = {
    ContentKind.AD: crud.get_random_ad,
    ContentKind.ANALYTICS: crud.get_analytics_code,
    ContentKind.CUSTOM_CODE: crud.get_custom_code,
    ContentKind.STATIC_FILES: crud.get_static_files,
}


class DesignContent:
    """
    Cached access to the design content of the site.

    One instance per request: it holds the request's DB session and a
    cache handle over the process-wide store.
    """

    def __init__(self, db: Session, cache: Optional[Cache] = None):
        self._db = db
        self._cache = cache or get_cache()

    def fetch(self, kind: ContentKind, *params: Any) -> Any:
        """
        Cache-aside lookup of one content kind.

        The params both distinguish the cache slot and are passed to the
        storage loader, so equal params always share a slot.
        """
        key = make_cache_key(kind, *params)
        self._cache.start(settings.cache_static_group, key, get_ttl_for_kind(kind))

        result = self._cache.get()
        if result.hit:
            return result.payload

        payload = LOADERS[kind](self._db, *params)
        self._cache.put(payload)
        logger.info(f"Loaded {kind.value} from database: {key} (empty={not payload})")
        return payload

    # ===== ADS =====

    def fetch_ad(self, width: int, height: int, only_active: bool = True) -> Optional[dict]:
        """Random banner for a slot size, cached for the TTL."""
        return self.fetch(ContentKind.AD, width, height, only_active)

    def ad(
        self,
        width: int,
        height: int,
        only_active: bool = True,
        context: Optional[RequestContext] = None,
    ) -> str:
        """
        Banner HTML for a slot size.

        Ads are never shown on the admin panel, but the lookup still runs
        there so the cache is warm for public pages.
        """
        if not settings.ads_enabled:
            return ""

        context = context or RequestContext()
        ad = self.fetch_ad(width, height, only_active)

        if context.is_admin or not ad:
            return ""
        return render_ad(ad)

    # ===== ANALYTICS =====

    def analytics_api(self, only_active: bool = True) -> Optional[str]:
        """Analytics snippet, or None when none is configured."""
        return self.fetch(ContentKind.ANALYTICS, only_active)

    # ===== CUSTOM CODE =====

    def custom_code(self, code_type: FileType) -> Optional[str]:
        """Custom CSS or JS code, or None when blank."""
        return self.fetch(ContentKind.CUSTOM_CODE, FileType(code_type).value)

    # ===== STATIC FILES =====

    def fetch_files(self, file_type: FileType, only_active: bool = True) -> List[str]:
        """Stored paths of extra CSS/JS files."""
        return self.fetch(ContentKind.STATIC_FILES, FileType(file_type).value, only_active)

    def files(self, file_type: FileType, only_active: bool = True) -> str:
        """Include tags for the extra CSS/JS files."""
        file_type = FileType(file_type)
        return render_files(file_type, self.fetch_files(file_type, only_active))
