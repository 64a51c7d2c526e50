from .api import ProjectViewSet

__all__ = ["ProjectViewSet"]
