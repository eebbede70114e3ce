from .counter import Counter
from .purchase_request import PurchaseRequest
from .user import AppUser
__all__ = ["Counter", "PurchaseRequest", "AppUser"]
