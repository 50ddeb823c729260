from .name import ImageName, find_registry

__all__ = ['ImageName', 'find_registry']
