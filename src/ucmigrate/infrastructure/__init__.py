"""Infrastructure layer — settings tree scanning, settings files, stores.

This layer depends on stdlib, pydantic, and the domain layer.
It must never import from services or config.
The service layer composes scanning and file access into migrations.
"""
