"""Core utilities: tokens, passwords, phone numbers, errors."""
