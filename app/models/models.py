"""
SQLAlchemy models for the template recommendation service
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base


class AgentTemplate(Base):
    """
    Agent template - catalog record read by the recommendation engine
    """
    __tablename__ = "AgentTemplates"
    
    id = Column(String, primary_key=True, unique=True)
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    category = Column(String, index=True, nullable=False)
    tags = Column(JSON)  # Array of tag strings
    is_official = Column(Boolean, default=False)
    is_public = Column(Boolean, default=False, index=True)
    is_active = Column(Boolean, default=True, index=True)
    usage_count = Column(Integer, default=0, index=True)
    rating = Column(Float, default=0.0)
    created_by = Column(String)
    
    createdAt = Column(DateTime, default=datetime.utcnow)
    updatedAt = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    usage_analytics = relationship("TemplateUsageAnalytics", back_populates="template")


class UserTemplatePreference(Base):
    """
    Per-user preference record (one row per user)
    """
    __tablename__ = "UserTemplatePreferences"
    
    user_id = Column(String, primary_key=True, unique=True)
    preferred_categories = Column(JSON, nullable=False, default=list)
    preferred_tags = Column(JSON, nullable=False, default=list)
    usage_history = Column(JSON, nullable=False, default=list)  # Array of usage events
    ratings = Column(JSON, nullable=False, default=list)
    search_history = Column(JSON, nullable=False, default=list)
    
    createdAt = Column(DateTime, default=datetime.utcnow)
    updatedAt = Column(DateTime, default=datetime.utcnow)


class TemplateUsageAnalytics(Base):
    """
    Daily usage counter keyed by template, user and day
    """
    __tablename__ = "TemplateUsageAnalytics"
    __table_args__ = (
        UniqueConstraint("template_id", "user_id", "date", name="uq_template_user_date"),
    )
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    template_id = Column(String, ForeignKey("AgentTemplates.id"), nullable=False, index=True)
    user_id = Column(String, index=True)
    date = Column(Date, nullable=False, index=True)
    usage_count = Column(Integer, nullable=False, default=1)
    
    createdAt = Column(DateTime, default=datetime.utcnow)
    
    # Relationships
    template = relationship("AgentTemplate", back_populates="usage_analytics")
