"""Core settings and shared enumerations."""
