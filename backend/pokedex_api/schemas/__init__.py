# Schemas package init
"""
Pokedex API — Pydantic Response Schemas
========================================

Schemas are the external JSON contract. Every schema inherits the camelCase
serializer configuration from `CamelModel`; routes return them and FastAPI
serializes by alias.
"""
