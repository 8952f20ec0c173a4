"""
Tests for cache-aside design content lookups.

Uses an in-memory SQLite database and a fake clock; database round trips
are counted to check which lookups are served from the cache.
"""
import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.dialects import mysql, sqlite
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import crud
from app.cache import Cache
from app.design import DesignContent
from app.models import Ad
from app.render import FileType, RequestContext
from config.settings import settings

GROUP = "db/design/static"


@pytest.fixture
def design(db, cache):
    return DesignContent(db, cache=cache)


# =============================================================================
# Ads
# =============================================================================

def test_no_matching_ad_caches_empty_result(design, cache, query_counter):
    """Missing banner is cached, nothing is rendered."""
    assert design.fetch_ad(160, 100, only_active=False) is None
    assert query_counter.selects == 1

    cache.start(GROUP, "ads_160_100_0", 172800)
    result = cache.get()
    assert result.hit
    assert result.payload is None

    assert design.ad(160, 100, only_active=False) == ""
    assert query_counter.selects == 1


def test_ad_is_rendered_with_click_tracker(db, design):
    ad = crud.add_ad(db, name="Banner", code="<a href='/x'>Buy</a>", width=468, height=60)

    html = design.ad(468, 60)
    assert "<a href='/x'>Buy</a>" in html
    assert f'id="ad_{ad.ads_id}"' in html
    assert f"{settings.ad_click_param}={ad.ads_id}" in html
    assert html.startswith('<div class="inline"')


def test_ad_only_active_filter(db, design):
    crud.add_ad(db, name="Off", code="OFF", width=300, height=250, active=False)

    assert design.ad(300, 250, only_active=True) == ""
    assert "OFF" in design.ad(300, 250, only_active=False)


def test_ad_is_cached_per_size(db, design, query_counter):
    crud.add_ad(db, name="Small", code="SMALL", width=160, height=100)
    crud.add_ad(db, name="Wide", code="WIDE", width=728, height=90)
    query_counter.selects = 0

    assert "SMALL" in design.ad(160, 100)
    assert "WIDE" in design.ad(728, 90)
    assert "SMALL" in design.ad(160, 100)
    assert query_counter.selects == 2


def test_admin_context_skips_render_but_warms_cache(db, design, cache, query_counter):
    crud.add_ad(db, name="Banner", code="BANNER", width=160, height=600)
    query_counter.selects = 0
    admin = RequestContext(module=settings.admin_module)

    assert admin.is_admin
    assert design.ad(160, 600, context=admin) == ""
    assert query_counter.selects == 1

    cache.start(GROUP, "ads_160_600_1", 172800)
    assert cache.get().payload["code"] == "BANNER"

    assert "BANNER" in design.ad(160, 600, context=RequestContext(module="user"))
    assert query_counter.selects == 1


def test_ads_disabled_skips_lookup(design, query_counter, monkeypatch):
    monkeypatch.setattr(settings, "ads_enabled", False)
    assert design.ad(160, 100) == ""
    assert query_counter.selects == 0


def test_ad_refreshed_after_expiry(db, design, clock, query_counter):
    crud.add_ad(db, name="Banner", code="FIRST", width=120, height=600)
    query_counter.selects = 0
    assert "FIRST" in design.ad(120, 600)

    # New banner replaces the old one in storage; cached value holds until expiry
    db.query(Ad).delete()
    crud.add_ad(db, name="Banner", code="SECOND", width=120, height=600)
    assert "FIRST" in design.ad(120, 600)

    clock.advance(172800)
    assert "SECOND" in design.ad(120, 600)


# =============================================================================
# Analytics
# =============================================================================

def test_analytics_served_from_cache(db, design, query_counter):
    crud.set_analytics_code(db, name="tracker", code="<script>X</script>")
    query_counter.selects = 0

    assert design.analytics_api() == "<script>X</script>"
    assert query_counter.selects == 1

    assert design.analytics_api() == "<script>X</script>"
    assert query_counter.selects == 1


def test_analytics_inactive_code(db, design):
    crud.set_analytics_code(db, name="tracker", code="<script>Y</script>", active=False)

    assert design.analytics_api(only_active=True) is None
    assert design.analytics_api(only_active=False) == "<script>Y</script>"


# =============================================================================
# Custom code and static files
# =============================================================================

def test_custom_code_by_type(db, design):
    crud.set_custom_code(db, "css", "body{color:red}")
    crud.set_custom_code(db, "js", "")

    assert design.custom_code(FileType.CSS) == "body{color:red}"
    assert design.custom_code("js") is None


def test_custom_code_rejects_unknown_type(design):
    with pytest.raises(ValueError):
        design.custom_code("html")


def test_static_files_rendered_with_path_vars(db, design):
    crud.add_static_file(db, "%url_static%css/theme.css", "css")
    crud.add_static_file(db, "%url_root%css/off.css", "css", active=False)
    crud.add_static_file(db, "%url_root%js/app.js", "js")

    css = design.files(FileType.CSS)
    assert css == f'<link rel="stylesheet" href="{settings.url_static}css/theme.css" />'

    js = design.files(FileType.JS)
    assert js == f'<script src="{settings.url_root}js/app.js"></script>'

    assert design.fetch_files(FileType.CSS, only_active=False) == [
        "%url_static%css/theme.css",
        "%url_root%css/off.css",
    ]


def test_no_static_files_renders_nothing(design, cache):
    assert design.files(FileType.JS) == ""
    cache.start(GROUP, "files_js_1", 172800)
    assert cache.get().payload == []


# =============================================================================
# Failures
# =============================================================================

def test_storage_failure_propagates_and_caches_nothing(cache):
    # Database without the design tables
    engine = create_engine("sqlite://", poolclass=StaticPool)
    session = sessionmaker(bind=engine)()
    design = DesignContent(session, cache=cache)

    try:
        with pytest.raises(OperationalError):
            design.analytics_api()
    finally:
        session.close()
        engine.dispose()

    assert cache.backend.entry_count() == 0


def test_disabled_cache_always_queries(db, backend, query_counter):
    crud.set_custom_code(db, "css", "p{}")
    query_counter.selects = 0
    design = DesignContent(db, cache=Cache(backend=backend, enabled=False))

    design.custom_code(FileType.CSS)
    design.custom_code(FileType.CSS)
    assert query_counter.selects == 2


def test_random_order_compiles_per_dialect():
    """Random banner ordering renders as RAND() on MySQL and random() elsewhere."""
    stmt = select(Ad.ads_id).order_by(func.random())

    assert "rand()" in str(stmt.compile(dialect=mysql.dialect())).lower()
    assert "random()" in str(stmt.compile(dialect=sqlite.dialect())).lower()
