CENTS_PER_DOLLAR = 100
MAX_CENTS_DIGITS = 2
CENTS_PER_TENTH = 10


class InvalidAmount(ValueError):
    """ Raised when a price or total is not a well-formed dollar amount """

    def __init__(self, field: str, amount, reason: str):
        self.field = field
        self.amount = amount
        self.reason = reason
        super().__init__(f"Error: invalid {field} ({amount})")


def is_digits(text: str) -> bool:
    """ True if every character is an ASCII digit (an empty string qualifies) """
    return all("0" <= c <= "9" for c in text)


def parse_cents(amount: str, field: str = "amount") -> int:
    """
    Converts a dollar amount string such as "12.34" into integer cents (1234).

    The whole-dollar part may be empty, and the part after the first "." may
    hold at most two digits. A single digit there means tenths of a dollar,
    so ".5" is 50 cents. `field` names the receipt field in the raised
    InvalidAmount.
    """
    if not isinstance(amount, str):
        raise InvalidAmount(field, amount, f"expected a string, got {type(amount).__name__}")
    dollars, _, cents = amount.partition(".")
    if not is_digits(dollars):
        raise InvalidAmount(field, amount, "dollar part must contain only digits")
    if not is_digits(cents) or len(cents) > MAX_CENTS_DIGITS:
        raise InvalidAmount(field, amount, f"cents part must be at most {MAX_CENTS_DIGITS} digits")
    parsed_cents = int(cents) if cents else 0
    if len(cents) == 1:
        parsed_cents *= CENTS_PER_TENTH
    try:
        parsed_dollars = int(dollars) if dollars else 0
    except ValueError:
        # int() refuses digit strings beyond sys.get_int_max_str_digits()
        raise InvalidAmount(field, amount, "amount too large") from None
    return parsed_dollars * CENTS_PER_DOLLAR + parsed_cents
