"""MailBlocks - email-safe template building blocks.

Validates block-based email templates, compiles them to MJML and renders
HTML through the MJML engine.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
