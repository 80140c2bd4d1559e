from . import plan

__all__ = ['plan']
