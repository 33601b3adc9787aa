"""Shared utilities: telemetry and cross-cutting helpers.

Used by application and infrastructure. No business logic.
"""
