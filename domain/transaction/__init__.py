from .entity import Customer, Refund, Transaction

__all__ = ["Customer", "Refund", "Transaction"]
