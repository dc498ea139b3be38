"""Infrastructure layer: I/O adapters around the email template domain."""
