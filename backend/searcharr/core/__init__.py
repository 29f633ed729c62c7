"""Core services: configuration, logging, indexers and search planning."""
