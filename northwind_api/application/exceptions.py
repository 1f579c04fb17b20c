"""Typed failures raised by the resource services.

Lookup misses are not errors: services return ``None``/``False`` for those and
the routes turn them into a 404. Everything here is translated into a
problem-details response by ``northwind_api.api.errors``.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for business-rule failures."""

    status_code = 500
    title = "An unexpected error occurred."

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(ServiceError):
    """Bad numeric, range or enum input."""

    status_code = 400
    title = "Bad request."

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class ReferenceNotFoundError(ServiceError):
    """A required related entity (supplier, customer, order, product) does not exist."""

    status_code = 400
    title = "Referenced resource not found."

    def __init__(self, resource: str, resource_id: Optional[int]):
        super().__init__(f"{resource} '{resource_id}' was not found.")
        self.resource = resource
        self.resource_id = resource_id


class ResourceInUseError(ServiceError):
    """Delete rejected because other records still reference the entity."""

    status_code = 409
    title = "Resource is in use."

    def __init__(self, resource: str, resource_id: int, dependents: str):
        super().__init__(f"{resource} '{resource_id}' still has {dependents} and cannot be deleted.")
        self.resource = resource
        self.resource_id = resource_id
