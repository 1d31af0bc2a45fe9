"""Service layer — resolution, transfer, and migration returning ServiceResult.

Services may import from domain and infrastructure layers.
They must never import from config.logging.
"""
