"""Cooldown store adapters.

The limiter depends only on ``AbstractTTLStore``; Redis is the production
backend and the in-memory store covers local development and tests.
"""
