"""Cross-cutting concerns: config, logging, errors, security, metrics."""
