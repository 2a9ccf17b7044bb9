"""File ingestion helpers (the package's only I/O boundary)."""
