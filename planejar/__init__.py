"""Planejar Patrimônio client core: identity session, record mapping, session store and demo seeding."""

__version__ = "1.0.0"
