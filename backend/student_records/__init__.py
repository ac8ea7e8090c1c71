"""Application package for the student records backend.

This package exposes the model, repository, query and service modules
used by the FastAPI application. Individual modules contain the
concrete implementations and documentation.
"""
