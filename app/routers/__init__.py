"""
Routers Package

This package contains the FastAPI routers that serve the HTML pages.

WHY Routers?
============
1. Organization: Group related pages together
2. Modularity: Each router has its own prefix and tags
3. Maintainability: Easy to find and modify page handlers

Router Structure:
- index.py: / (catalog home page)
- users.py: /users/* (signup, login, logout, profile)
- books.py: /catalog/books/*
- authors.py: /catalog/authors/*
- genres.py: /catalog/genres/*
- book_instances.py: /catalog/bookinstances/*

Each router is imported and registered in main.py.
"""

from app.routers.authors import router as authors_router
from app.routers.book_instances import router as book_instances_router
from app.routers.books import router as books_router
from app.routers.genres import router as genres_router
from app.routers.index import router as index_router
from app.routers.users import router as users_router

__all__ = [
    "index_router",
    "users_router",
    "books_router",
    "authors_router",
    "genres_router",
    "book_instances_router",
]
