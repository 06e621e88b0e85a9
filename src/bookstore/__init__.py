"""Bookstore API.

A small FastAPI service exposing the ``books`` table, with database
credentials bootstrapped from Vault at process start.
"""

__version__ = "0.1.0"
