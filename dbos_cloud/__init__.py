"""Command-line client for managing cloud-hosted Postgres databases."""

__version__ = "0.1.0"
