from makehelp.ordering.service import OrderingConfig, apply_ordering

__all__ = ["OrderingConfig", "apply_ordering"]
