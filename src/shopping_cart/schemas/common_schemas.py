from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

from marshmallow import ValidationError as SchemaValidationError

from shopping_cart.core.exceptions import ValidationError

CENTS = Decimal("0.01")


def format_money(amount: Decimal) -> str:
    """Render a decimal amount with exactly two places, e.g. '35.00'"""
    return str(Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP))


def load_or_raise(schema, data: Dict[str, Any]) -> Dict[str, Any]:
    """Load data through a marshmallow schema, raising the API ValidationError on failure"""
    try:
        return schema.load(data)
    except SchemaValidationError as err:
        field_errors: List[Dict[str, str]] = []
        for field_name, messages in err.normalized_messages().items():
            if isinstance(messages, dict):
                messages = [str(m) for m in messages.values()]
            for message in messages:
                field_errors.append({"field": field_name, "message": str(message)})
        raise ValidationError("Invalid request parameters", field_errors)
