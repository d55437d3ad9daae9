"""
Common Error Constants

Human-readable messages returned with cart failures.
"""

# Identity
ERROR_UNAUTHENTICATED = "Please log in to use the cart"

# Catalog
ERROR_PRODUCT_NOT_FOUND = "Product not found"

# Cart
ERROR_ITEM_NOT_FOUND = "Item not found in cart"
ERROR_CART_UNAVAILABLE = "Cart service unavailable"

# Success messages
MESSAGE_ITEM_ADDED = "Added to cart"
MESSAGE_QUANTITY_UPDATED = "Quantity updated"
MESSAGE_ITEM_REMOVED = "Removed from cart"
MESSAGE_ITEM_EDITED = "Item updated"
MESSAGE_CART_CLEARED = "Cart cleared"
