"""
Database models for site design content
SQLAlchemy ORM models for ads, analytics code, custom code and static files
"""
from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.orm import declarative_base

from config.settings import settings

Base = declarative_base()


def _table(name: str) -> str:
    return f"{settings.table_prefix}{name}"


class Ad(Base):
    """
    Advertising banner - one record per creative
    A slot (width x height) may have many banners; one is picked at random
    """
    __tablename__ = _table("ads")

    ads_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    code = Column(Text, nullable=False)
    width = Column(Integer, nullable=False, index=True)
    height = Column(Integer, nullable=False, index=True)
    active = Column(Boolean, nullable=False, default=True)

    def to_payload(self) -> dict:
        """Plain-data form stored in the cache."""
        return {
            "ads_id": self.ads_id,
            "name": self.name,
            "code": self.code,
            "width": self.width,
            "height": self.height,
            "active": bool(self.active),
        }

    def __repr__(self):
        return f"<Ad(ads_id={self.ads_id}, size={self.width}x{self.height}, active={self.active})>"


class AnalyticsApi(Base):
    """
    Analytics tracking snippet (e.g. a <script> block)
    """
    __tablename__ = _table("analytics_api")

    analytics_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    code = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<AnalyticsApi(analytics_id={self.analytics_id}, name='{self.name}', active={self.active})>"


class CustomCode(Base):
    """
    Admin-authored code injected into every page - one record per type (css/js)
    """
    __tablename__ = _table("custom_code")

    code_type = Column(String, primary_key=True)
    code = Column(Text, nullable=True)

    def __repr__(self):
        return f"<CustomCode(code_type='{self.code_type}')>"


class StaticFile(Base):
    """
    Extra CSS/JS file included in page heads
    """
    __tablename__ = _table("static_files")

    static_id = Column(Integer, primary_key=True, autoincrement=True)
    file = Column(String, nullable=False)
    file_type = Column(String, nullable=False, index=True)
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<StaticFile(static_id={self.static_id}, file='{self.file}', file_type='{self.file_type}')>"
