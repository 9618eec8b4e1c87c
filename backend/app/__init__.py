"""Servicing analytics backend application package."""
