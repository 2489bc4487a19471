"""Route group exports."""

from . import distance, health, invoices, pricing, quotes, services, slots

__all__ = ["distance", "health", "invoices", "pricing", "quotes", "services", "slots"]
