"""
Common Error Constants

Centralized API error messages.
"""

# Session errors
ERROR_INVALID_SESSION = "Invalid X-Session-Id header"

# Cart errors
ERROR_ITEM_NOT_IN_CART = "Item not in cart"

# Order errors
ERROR_ORDER_SUBMIT_FAILED = "Failed to submit order"
