"""Application package for the blog API (usuários, temas, postagens).

This package exposes the model, repository and service modules used by
the FastAPI application. Individual modules contain the concrete
implementations and documentation.
"""
