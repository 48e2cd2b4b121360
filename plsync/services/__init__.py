"""Service layer shared by the CLI (no Qt dependency)."""
