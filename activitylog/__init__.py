"""In-process HTTP request/activity logger."""
