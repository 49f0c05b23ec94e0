"""Celery task definitions."""
