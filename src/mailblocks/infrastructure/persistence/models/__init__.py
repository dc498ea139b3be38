"""SQLAlchemy models for MailBlocks.

All models inherit from the Base class defined in database.py.
"""

from mailblocks.infrastructure.persistence.models.email_design import EmailDesignModel

__all__ = ["EmailDesignModel"]
