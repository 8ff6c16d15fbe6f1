#Expose the generation pipeline:
#GenerationWorkflow (the "one call" entry point for an editor's Generate button)
#maintenance passes over stored geometry

from .workflow import GenerationWorkflow, GenerationResult, GeneratedNotSavedError
from .batch import resimplify_collection, geometry_report

__all__ = [
    "GenerationWorkflow",
    "GenerationResult",
    "GeneratedNotSavedError",
    "resimplify_collection",
    "geometry_report",
]
