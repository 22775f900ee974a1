from .record import Record
from .soft_deletes import SoftDeletes

__all__ = ["Record", "SoftDeletes"]
