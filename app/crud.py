"""
CRUD operations for design content
Parameterized reads return plain data (dicts, strings, lists) ready for caching
"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Ad, AnalyticsApi, CustomCode, StaticFile


# ===== ADS =====

def get_random_ad(
    db: Session,
    width: int,
    height: int,
    only_active: bool = True
) -> Optional[dict]:
    """
    Pick one banner of the given size at random
    - only_active: restrict to banners with active = 1
    """
    query = db.query(Ad).filter(Ad.width == width, Ad.height == height)

    if only_active:
        query = query.filter(Ad.active.is_(True))

    ad = query.order_by(func.random()).first()
    return ad.to_payload() if ad else None


def add_ad(
    db: Session,
    name: str,
    code: str,
    width: int,
    height: int,
    active: bool = True
) -> Ad:
    """
    Create a banner
    """
    ad = Ad(name=name, code=code, width=width, height=height, active=active)
    db.add(ad)
    db.commit()
    db.refresh(ad)
    return ad


# ===== ANALYTICS =====

def get_analytics_code(db: Session, only_active: bool = True) -> Optional[str]:
    """
    Get the analytics snippet (first matching row)
    """
    query = db.query(AnalyticsApi.code)

    if only_active:
        query = query.filter(AnalyticsApi.active.is_(True))

    row = query.order_by(AnalyticsApi.analytics_id).first()
    return row.code if row else None


def set_analytics_code(
    db: Session,
    name: str,
    code: str,
    active: bool = True
) -> AnalyticsApi:
    """
    Create or update the analytics snippet registered under name
    """
    analytics = db.query(AnalyticsApi).filter(AnalyticsApi.name == name).first()
    if analytics is None:
        analytics = AnalyticsApi(name=name)
        db.add(analytics)
    analytics.code = code
    analytics.active = active
    db.commit()
    db.refresh(analytics)
    return analytics


# ===== CUSTOM CODE =====

def get_custom_code(db: Session, code_type: str) -> Optional[str]:
    """
    Get custom code for a type ("css" or "js")
    Blank code is returned as None
    """
    row = db.query(CustomCode.code).filter(CustomCode.code_type == code_type).first()
    if row is None or not row.code:
        return None
    return row.code


def set_custom_code(db: Session, code_type: str, code: Optional[str]) -> CustomCode:
    """
    Create or replace custom code for a type
    """
    custom = db.get(CustomCode, code_type)
    if custom is None:
        custom = CustomCode(code_type=code_type)
        db.add(custom)
    custom.code = code
    db.commit()
    db.refresh(custom)
    return custom


# ===== STATIC FILES =====

def get_static_files(
    db: Session,
    file_type: str,
    only_active: bool = True
) -> List[str]:
    """
    Get static file paths of a type ("css" or "js")
    - only_active: restrict to files with active = 1
    """
    query = db.query(StaticFile.file).filter(StaticFile.file_type == file_type)

    if only_active:
        query = query.filter(StaticFile.active.is_(True))

    return [row.file for row in query.order_by(StaticFile.static_id).all()]


def add_static_file(
    db: Session,
    file: str,
    file_type: str,
    active: bool = True
) -> StaticFile:
    """
    Register a static file
    """
    static_file = StaticFile(file=file, file_type=file_type, active=active)
    db.add(static_file)
    db.commit()
    db.refresh(static_file)
    return static_file
