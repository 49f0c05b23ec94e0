"""CRUD operation classes and singletons."""

from documind.boundary.db.CRUD.base_crud import BaseCRUD
from documind.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud

__all__ = ["BaseCRUD", "DocumentCRUD", "document_crud"]
