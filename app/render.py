"""
Presentation helpers for design content.
Turns cached payloads into HTML fragments. Ad and analytics code is trusted
admin input and emitted as-is; URLs built here are attribute-escaped.
"""
from dataclasses import dataclass
from enum import Enum
from html import escape
from typing import Callable, Dict, Iterable, Optional

from config.settings import settings


class FileType(str, Enum):
    """Static file / custom code types."""
    CSS = "css"
    JS = "js"


@dataclass(frozen=True)
class RequestContext:
    """What the renderer needs to know about the current request."""
    module: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.module is not None and self.module == settings.admin_module


# =============================================================================
# STATIC FILES
# =============================================================================

def expand_path_vars(path: str) -> str:
    """
    Replace site variables in a stored file path.

    Example:
        "%url_static%css/extra.css" -> "http://localhost:8000/static/css/extra.css"
    """
    variables = {
        "%url_root%": settings.url_root,
        "%url_static%": settings.url_static,
    }
    for name, value in variables.items():
        path = path.replace(name, value)
    return path


def external_css_file(url: str) -> str:
    return f'<link rel="stylesheet" href="{escape(url)}" />'


def external_js_file(url: str) -> str:
    return f'<script src="{escape(url)}"></script>'


FILE_RENDERERS: Dict[FileType, Callable[[str], str]] = {
    FileType.CSS: external_css_file,
    FileType.JS: external_js_file,
}


def render_files(file_type: FileType, files: Iterable[str]) -> str:
    """Render include tags for a list of stored file paths."""
    renderer = FILE_RENDERERS[file_type]
    return "\n".join(renderer(expand_path_vars(f)) for f in files)


# =============================================================================
# ADS
# =============================================================================

def ad_click_url(ads_id: int) -> str:
    return f"{settings.url_root}?{settings.ad_click_param}={ads_id}"


def render_ad(ad: dict) -> str:
    """
    Banner markup: click tracker wrapper, the ad code, and a hidden pixel
    whose src is swapped to the click URL when the banner is clicked.
    """
    ads_id = int(ad["ads_id"])
    pixel_id = f"ad_{ads_id}"
    click_url = escape(ad_click_url(ads_id))
    blank_src = escape(f"{settings.url_static}{settings.img_dir}useful/blank.gif")
    return (
        f'<div class="inline" onclick="$(\'#{pixel_id}\').attr(\'src\',\'{click_url}\');return true;">'
        f'{ad["code"]}'
        f'<img src="{blank_src}" style="border:0;width:0px;height:0px;" alt="" id="{pixel_id}" />'
        f'</div>'
    )
