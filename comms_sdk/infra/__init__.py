"""Infrastructure: logging, metrics and HTTP transport."""
