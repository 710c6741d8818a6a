from . import single_point

__all__ = ["single_point"]
