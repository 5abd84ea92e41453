from . import cma

__all__ = ['cma']
