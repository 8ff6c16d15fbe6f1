"""
Routes domain package.

Public API:
- Domain models: RouteSpec, RouteDocument, GeneratedGeometry, POI, POICategory
- Storage: DocumentStore, InMemoryDocumentStore, JsonFileDocumentStore
- Configuration: PipelinePolicy, default_policy
"""
from .models import RouteSpec, RouteDocument, GeneratedGeometry, POI, POICategory, RouteValidationError
from .policy import PipelinePolicy, default_policy
from .store import DocumentStore, InMemoryDocumentStore, JsonFileDocumentStore, StorageError

__all__ = ["RouteSpec",
           "RouteDocument",
             "GeneratedGeometry",
               "POI",
               "POICategory",
               "RouteValidationError",
               "PipelinePolicy",
               "default_policy",
               "DocumentStore",
               "InMemoryDocumentStore",
               "JsonFileDocumentStore",
               "StorageError",
               ]
