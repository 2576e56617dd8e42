from .heat_transform import BlackScholesHeatTransform, bs_price_heat

__all__ = ["BlackScholesHeatTransform", "bs_price_heat"]
