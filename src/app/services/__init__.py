from .stock_lock import StockLock
from .notification_service import NotificationService

__all__ = [
    "StockLock",
    "NotificationService",
]
