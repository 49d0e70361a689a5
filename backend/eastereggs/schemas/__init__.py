"""API Schemas: Pydantic request/response models."""
