"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and authentication model
- Bootcamp: Bootcamp listing, owned by a publisher (or admin)
- Course: Course offered by a Bootcamp
- Review: Review of a Bootcamp written by a user
"""
from .user import User
from .bootcamp import Bootcamp
from .course import Course
from .review import Review
