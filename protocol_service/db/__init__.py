"""Persistence layer: models, schemas, repositories and migrations runner."""
