"""
Catalog package for the books API.

This package holds everything between the HTTP routes and the store:
Buddhist Era date normalization, submission validation, the ingestion
and retrieval services and the response schemas. The routes live in
``router.py`` and are mounted by ``books_api.main``.
"""
