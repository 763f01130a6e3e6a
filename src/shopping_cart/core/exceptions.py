from typing import Optional, Dict, Any, List


class BaseAPIException(Exception):
    def __init__(self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        internal_message: Optional[str] = None):
        self.message = message  # User-facing message
        self.internal_message = internal_message or message  # Internal/debug message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__.replace('Error', '').upper()
        self.details = details or {}

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response"""
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


class ValidationError(BaseAPIException):
    """Raised when request validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[List[Dict[str, str]]] = None
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, 400, "VALIDATION_ERROR", details)


class InvalidQuantityError(ValidationError):
    """Raised when a cart quantity is not a countable number of units"""

    def __init__(self, quantity: Any):
        super().__init__(
            f"Quantity must be at least 1, got {quantity}",
            [{"field": "quantity", "message": "must be >= 1"}]
        )
        self.error_code = "INVALID_QUANTITY"
        self.quantity = quantity


class NotFoundError(BaseAPIException):
    """Raised when a requested resource is not found"""

    def __init__(self, resource: str = "Resource", resource_id: Optional[str] = None):
        message = f"{resource} not found"
        if resource_id:
            message += f" with ID: {resource_id}"
        super().__init__(message, 404, "NOT_FOUND")


class ProductNotFoundError(NotFoundError):
    """Raised when a cart operation references a product missing from the catalog"""

    def __init__(self, product_id: str):
        super().__init__("Product", product_id)
        self.error_code = "PRODUCT_NOT_FOUND"
        self.product_id = product_id


class ConflictError(BaseAPIException):
    """Raised when there's a conflict with the current state"""

    def __init__(self, message: str = "Resource conflict", conflict_field: Optional[str] = None):
        details = {"conflict_field": conflict_field} if conflict_field else {}
        super().__init__(message, 409, "CONFLICT", details)


class BusinessLogicError(BaseAPIException):
    """Raised when business rules are violated"""

    def __init__(self, message: str, rule: Optional[str] = None):
        details = {"violated_rule": rule} if rule else {}
        super().__init__(message, 422, "BUSINESS_LOGIC_ERROR", details)


class CartLimitError(BusinessLogicError):
    """Raised when a cart would hold more distinct lines than allowed"""

    def __init__(self, limit: int):
        super().__init__(
            f"Cannot add more than {limit} different items to cart",
            rule="max_cart_items_exceeded"
        )
        self.limit = limit


class StoreUnavailableError(BaseAPIException):
    """Raised when the document store cannot be reached or times out"""

    def __init__(self, operation: str, message: str = "Store unavailable"):
        details = {"operation": operation, "retryable": True}
        super().__init__(
            "The storage backend is temporarily unavailable. Please retry.",
            503,
            "STORE_UNAVAILABLE",
            details,
            internal_message=message
        )


class DatabaseError(BaseAPIException):
    """Raised when database operations fail"""

    def __init__(self, message: str = "Database operation failed", operation: Optional[str] = None):
        # Don't expose internal database details to users
        user_message = "An internal error occurred. Please try again later."
        details = {"operation": operation} if operation else {}
        super().__init__(
            user_message,
            500,
            "DATABASE_ERROR",
            details,
            internal_message=message  # Keep original message for logging
        )
