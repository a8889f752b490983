"""Base layer: models, errors, logging, cancellation, timeouts and streaming."""
