"""Repositories for MailBlocks persistence."""

from mailblocks.infrastructure.persistence.repositories.email_design_repository import (
    EmailDesignRepository,
    dump_template,
)

__all__ = ["EmailDesignRepository", "dump_template"]
