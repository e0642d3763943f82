"""Core types: exceptions, schemas, configuration and settings."""
