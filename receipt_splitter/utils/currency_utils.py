from decimal import Decimal

from babel.numbers import (
    format_currency as babel_format_currency,
    get_currency_name,
    get_currency_symbol,
)

from receipt_splitter.schemas.currency import CurrencyInfo
from receipt_splitter.schemas.receipt import DEFAULT_CURRENCY
from receipt_splitter.utils.decimal_utils import ZERO, is_finite_number, quantize_money, to_decimal

# Only what the CLDR data can't tell us: which locale to format with, and the
# number of decimal places we settle in.
CURRENCY_METADATA: dict[str, tuple[str, int]] = {
    "USD": ("en_US", 2),
    "EUR": ("de_DE", 2),
    "GBP": ("en_GB", 2),
    "CAD": ("en_CA", 2),
    "AUD": ("en_AU", 2),
    "JPY": ("ja_JP", 0),
    "CNY": ("zh_CN", 2),
    "INR": ("en_IN", 2),
    "MXN": ("es_MX", 2),
    "CHF": ("de_CH", 2),
    "SEK": ("sv_SE", 2),
    "NZD": ("en_NZ", 2),
    "SGD": ("en_SG", 2),
    "HKD": ("en_HK", 2),
    "NOK": ("nb_NO", 2),
    "DKK": ("da_DK", 2),
    "PLN": ("pl_PL", 2),
    "BRL": ("pt_BR", 2),
    "KRW": ("ko_KR", 0),
    "TRY": ("tr_TR", 2),
}

# Insert-only; an entry is never replaced once built.
_currency_info_cache: dict[str, CurrencyInfo] = {}


def _build_currency_info(code: str) -> CurrencyInfo:
    locale, minor_units = CURRENCY_METADATA[code]
    return CurrencyInfo(
        code=code,
        # English names throughout, regardless of the formatting locale
        name=get_currency_name(code, locale="en_US"),
        symbol=get_currency_symbol(code, locale=locale),
        locale=locale,
        minor_units=minor_units,
    )


def _normalize_code(currency_code) -> str:
    if not isinstance(currency_code, str):
        return DEFAULT_CURRENCY
    return currency_code.strip().upper()


def get_currency_info(currency_code: str) -> CurrencyInfo:
    """
    Currency metadata for a code, falling back to USD for anything unknown.
    Repeated lookups return the same cached CurrencyInfo instance.
    """
    code = _normalize_code(currency_code)
    cached = _currency_info_cache.get(code)
    if cached is not None:
        return cached

    if code not in CURRENCY_METADATA:
        return get_currency_info(DEFAULT_CURRENCY)

    info = _build_currency_info(code)
    return _currency_info_cache.setdefault(code, info)


def is_supported_currency(currency_code: str) -> bool:
    return isinstance(currency_code, str) and currency_code in CURRENCY_METADATA


def get_supported_currencies() -> list[CurrencyInfo]:
    return sorted(
        (get_currency_info(code) for code in CURRENCY_METADATA),
        key=lambda info: info.name,
    )


def to_minor_units(amount, currency_code: str = DEFAULT_CURRENCY) -> int:
    """
    Convert a major-unit amount to integer minor units, e.g. 12.34 USD -> 1234.
    Non-finite input (NaN, infinities, non-numbers) converts to 0.
    """
    currency = get_currency_info(currency_code)
    if not is_finite_number(amount):
        return 0
    scaled = to_decimal(amount) * (Decimal(10) ** currency.minor_units)
    return int(quantize_money(scaled, 0))


def from_minor_units(amount_minor_units, currency_code: str = DEFAULT_CURRENCY) -> float:
    """Convert integer minor units back to major units, e.g. 1234 USD -> 12.34."""
    currency = get_currency_info(currency_code)
    if not is_finite_number(amount_minor_units):
        return 0.0
    divisor = Decimal(10) ** currency.minor_units
    return float(to_decimal(amount_minor_units) / divisor)


def format_currency(amount, currency_code: str = DEFAULT_CURRENCY) -> str:
    """Locale-correct display string, e.g. '$12.50', '12,50 €', '￥1,250'."""
    currency = get_currency_info(currency_code)
    value = to_decimal(amount) if is_finite_number(amount) else ZERO
    value = quantize_money(value, currency.minor_units)
    # CLDR fraction digits agree with CURRENCY_METADATA for every supported code
    return babel_format_currency(value, currency.code, locale=currency.locale)
