CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "VND": "₫",
}

# Currencies without minor units
_ZERO_DECIMAL_CURRENCIES = {"VND"}


def currency_symbol(currency_code: str) -> str:
    return CURRENCY_SYMBOLS.get(currency_code.upper(), "$")


def format_currency(amount: float, currency_code: str = "USD") -> str:
    code = currency_code.upper()
    symbol = currency_symbol(code)
    decimals = 0 if code in _ZERO_DECIMAL_CURRENCIES else 2
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.{decimals}f}"
