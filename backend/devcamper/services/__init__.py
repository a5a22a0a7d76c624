"""
Services Module

- aggregates: averageCost / averageRating recomputation
- bootcamps: bootcamp creation, updates, cascade delete and radius search
- geocoder: address geocoding (MapQuest)
- mailer: outgoing email (SMTP)
- query: advanced results for list endpoints
"""

from .geocoder import GeoResult, GeocodingService
from .mailer import MailService

__all__ = [
    "GeoResult",
    "GeocodingService",
    "MailService",
]
