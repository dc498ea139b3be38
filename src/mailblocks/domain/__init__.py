"""Domain layer for MailBlocks: the email document model and its services."""
