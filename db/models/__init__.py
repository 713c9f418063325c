from .user import User
from .material import RawMaterial
from .process import Process

from .stock_purchase import StockPurchase
from .stock_status import StockStatus
from .production_status import ProductionStatus

__all__ = [n for n in dir() if n[:1].isupper()]
