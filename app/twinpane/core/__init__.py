"""Core services: configuration, paths, cancellation and notifications."""
