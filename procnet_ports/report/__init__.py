from .join import attach_owners
from .filters import select, select_records

__all__ = ["attach_owners", "select", "select_records"]
