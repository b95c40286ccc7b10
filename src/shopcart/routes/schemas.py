from marshmallow import Schema, fields, validate, validates, ValidationError, EXCLUDE


class AddCartItemSchema(Schema):
    """Accepts JSON or form posts; quantity may arrive as a string"""

    class Meta:
        unknown = EXCLUDE

    product_id = fields.Str(
        required=True, data_key="productId", validate=validate.Length(min=1, max=64)
    )
    quantity = fields.Int(load_default=1)

    def __init__(self, max_quantity: int = 10, **kwargs):
        super().__init__(**kwargs)
        self.max_quantity = max_quantity

    @validates("quantity")
    def validate_quantity(self, value, **kwargs):
        if value < 1 or value > self.max_quantity:
            raise ValidationError(f"Quantity must be between 1 and {self.max_quantity}")


class UpdateCartItemSchema(Schema):
    """Quantity 0 (or below) removes the line"""

    class Meta:
        unknown = EXCLUDE

    quantity = fields.Int(required=True)


class MergeCartSchema(Schema):

    class Meta:
        unknown = EXCLUDE

    guest_cart_id = fields.Str(
        required=True, data_key="guestCartId", validate=validate.Length(min=1)
    )
