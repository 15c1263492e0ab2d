"""
User-facing message catalogue (Arabic / English).

Business-rule detection maps raw backend text onto a catalogue key so the
coordinator can show a localized sentence instead of a stack-trace fragment.
"""

from __future__ import annotations

from collections.abc import Mapping

from cartsync._config import DEFAULT_LANG


MESSAGES: Mapping[str, Mapping[str, str]] = {
    "en": {
        "error": "Error",
        "warning": "Warning",
        "order_error": "Order error",
        "order_success_title": "🎉 Order created successfully!",
        "order_success": "Order number: {order_number}\nAmount: {total} {currency}\nPayment: cash on delivery",
        "order_failed": "Failed to create the order. Please try again",
        "please_wait": "⏳ Order is being processed, please wait...",
        "incomplete_address": "Please complete shipping details: {fields}",
        "cart_empty": "Cart is empty",
        "rate_limited": "Too many requests. Please wait a moment and try again.",
        "csrf_expired": "Session token mismatch. Refresh the page or sign in again.",
        "unauthenticated": "Your session has expired. Please sign in again.",
        "product_unavailable": "This product is currently unavailable. Refresh the page and try again.",
        "product_not_found": "The requested product no longer exists.",
        "insufficient_stock": "Sorry, the requested quantity is not available in stock.",
        "field.name": "name",
        "field.phone": "phone",
        "field.governorate": "governorate",
        "field.city": "city",
        "field.street": "street",
    },
    "ar": {
        "error": "خطأ",
        "warning": "تنبيه",
        "order_error": "خطأ في الطلب",
        "order_success_title": "🎉 تم إنشاء الطلب بنجاح!",
        "order_success": "رقم الطلب: {order_number}\nالمبلغ: {total} {currency}\nالدفع: عند الاستلام",
        "order_failed": "فشل في إنشاء الطلب. حاول مرة أخرى",
        "please_wait": "⏳ جاري معالجة الطلب، يرجى الانتظار...",
        "incomplete_address": "يرجى إكمال بيانات الشحن: {fields}",
        "cart_empty": "السلة فارغة",
        "rate_limited": "طلبات كثيرة جداً. يرجى الانتظار قليلاً والمحاولة مرة أخرى.",
        "csrf_expired": "انتهت صلاحية الجلسة. يرجى تحديث الصفحة أو تسجيل الخروج والدخول مرة أخرى",
        "unauthenticated": "انتهت صلاحية الجلسة. يرجى تسجيل الدخول مرة أخرى.",
        "product_unavailable": "هذا المنتج غير متوفر حالياً. يرجى تحديث الصفحة والمحاولة مرة أخرى.",
        "product_not_found": "المنتج المطلوب غير موجود أو تم حذفه.",
        "insufficient_stock": "عذراً، الكمية المطلوبة غير متوفرة في المخزون.",
        "field.name": "الاسم",
        "field.phone": "رقم الهاتف",
        "field.governorate": "المحافظة",
        "field.city": "المدينة",
        "field.street": "الشارع",
    },
}


def translate(key: str, lang: str, **params: object) -> str:
    """Look up key for lang (falling back to the default locale)."""
    table = MESSAGES.get(lang) or MESSAGES[DEFAULT_LANG]
    template = table.get(key) or MESSAGES[DEFAULT_LANG].get(key, key)
    return template.format(**params) if params else template


# ═══════════════════════════════════════════════════════════════════════════════
# Business Rules — raw backend text → catalogue key
# ═══════════════════════════════════════════════════════════════════════════════

# Each rule: all fragments must appear (case-insensitive). First match wins.
_BUSINESS_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("attempt to read property", "null"), "product_unavailable"),
    (("product", "not found"), "product_not_found"),
    (("stock", "insufficient"), "insufficient_stock"),
    (("insufficient", "quantity"), "insufficient_stock"),
)


def business_rule_key(message: str) -> str | None:
    """Return the catalogue key for a known business-rule failure."""
    lowered = message.lower()
    for fragments, key in _BUSINESS_RULES:
        if all(fragment in lowered for fragment in fragments):
            return key
    return None


def localize_backend_message(message: str, lang: str) -> str:
    """Replace known business-rule failures with localized text."""
    key = business_rule_key(message)
    if key is None:
        return message
    return translate(key, lang)


__all__ = (
    "MESSAGES",
    "translate",
    "business_rule_key",
    "localize_backend_message",
)
