"""
ShopGenie - multi-store storefront engine.

Holds every store a user runs, the active-store selection, the shopping cart
and the notification feed, and mirrors catalog changes to Stripe on a best
effort basis. The entry point is shopgenie.services.storefront.Storefront.
"""

__version__ = "1.0.0"
