"""REST data collaborator for the dashboard backend."""

from accessdesk.api.client import ApiError, RestClient

__all__ = ["ApiError", "RestClient"]
