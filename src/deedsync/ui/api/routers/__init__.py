"""Route modules of the ingest API."""
