"""Race-day fueling plans from a product catalog and per-hour nutrient targets."""

__version__ = "0.1.0"
