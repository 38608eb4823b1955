"""
Business logic services
"""
from . import recommendations_service

__all__ = [
    "recommendations_service"
]
