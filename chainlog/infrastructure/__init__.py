"""Infrastructure layer: rendering and delivery of log entries."""
