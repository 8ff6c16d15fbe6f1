from .resolver import RenderingResolver, RenderedRoute, GeometrySource

__all__ = ["RenderingResolver", "RenderedRoute", "GeometrySource"]
