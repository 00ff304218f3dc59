"""Shared configuration, logging, errors and types."""
