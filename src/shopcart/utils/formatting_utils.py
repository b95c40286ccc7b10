from decimal import Decimal, ROUND_HALF_UP
from typing import Union


class FormattingUtils:
    """
    Money formatting for API responses and user-facing messages.

    Amounts are Decimal end to end; floats only ever appear at the edge when
    a client sends one.
    """

    CURRENCY_SYMBOL = '$'
    CENT = Decimal('0.01')

    @classmethod
    def to_decimal(cls, amount: Union[Decimal, int, float, str]) -> Decimal:
        """Coerce an amount to a two-place Decimal"""
        if not isinstance(amount, Decimal):
            # str() keeps 299.99 from turning into 299.98999...
            amount = Decimal(str(amount))
        return amount.quantize(cls.CENT, rounding=ROUND_HALF_UP)

    @classmethod
    def money_string(cls, amount: Union[Decimal, int, float, str]) -> str:
        """
        Render an amount for JSON payloads

        Examples:
            money_string(Decimal('599.98')) -> "599.98"
            money_string(0) -> "0.00"
        """
        return str(cls.to_decimal(amount))

    @classmethod
    def format_money(cls, amount: Union[Decimal, int, float, str]) -> str:
        """
        Format money amount for display

        Examples:
            format_money(Decimal('1299.5')) -> "$1,299.50"
        """
        return f"{cls.CURRENCY_SYMBOL}{cls.to_decimal(amount):,.2f}"
