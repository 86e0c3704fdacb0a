"""FastAPI service exposing form sessions, list views, and summaries."""
