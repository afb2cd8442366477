from typing import Union

AED_SYMBOL = "Ð"


def format_aed_amount(amount: Union[str, int, float]) -> str:
    """Ð-prefixed display string. Numbers get two decimals; strings lose any AED marker."""
    if isinstance(amount, (int, float)):
        return f"{AED_SYMBOL} {amount:.2f}"

    normalized = amount.replace("AED", "").replace("د.إ", "").replace(AED_SYMBOL, "").strip()
    return f"{AED_SYMBOL} {normalized}" if normalized else AED_SYMBOL
