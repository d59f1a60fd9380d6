"""Common Lambda utilities: the base handler class, logging, exceptions and constants."""
