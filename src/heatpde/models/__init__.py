from .bs import d1_d2, european_price

__all__ = ["d1_d2", "european_price"]
