"""Core configuration, constants, exceptions and logging."""
