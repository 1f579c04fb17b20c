"""Application layer: DTO schemas, validation, paging and the resource services."""
