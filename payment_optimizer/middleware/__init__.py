"""HTTP middleware: error handling, metrics and rate limiting."""
