"""Receipt service - plain-text receipts for completed sales."""

from typing import List

from pos.models import Sale, TaxSettings, BusinessInfo, ReceiptSettings
from pos.utils.formatters import money, percent, receipt_datetime

RULE = '━' * 22
LABEL_WIDTH = 13


def _centered(text: str) -> str:
    return text.center(len(RULE)).rstrip()


def _business_block(info: BusinessInfo, settings: ReceiptSettings) -> List[str]:
    lines = []
    for value in (info.name, info.address, info.phone, info.email):
        if value:
            lines.extend(_centered(part) for part in value.splitlines())
    if settings.show_website and info.website:
        lines.append(_centered(info.website))
    if settings.show_tax_number and info.tax_number:
        lines.append(_centered(f"Tax No: {info.tax_number}"))
    return lines


def render_receipt_text(
    sale: Sale,
    tax_settings: TaxSettings,
    business_info: BusinessInfo,
    receipt_settings: ReceiptSettings
) -> str:
    """
    Render a sale as a shareable text receipt.

    Amounts come from the sale itself. Business details, the tax label and
    header/footer messages are read from the settings passed in, i.e. as they
    are at print time.
    """
    lines = [RULE, _centered('RECEIPT'), RULE, '']

    if receipt_settings.header:
        lines.extend([_centered(receipt_settings.header), ''])

    business = _business_block(business_info, receipt_settings)
    if business:
        lines.extend(business + [''])

    lines.extend([
        f"Receipt #: {sale.receipt_number}",
        f"Date: {receipt_datetime(sale.timestamp)}",
        f"Payment: {sale.payment_method.label}",
        '',
        RULE,
        'ITEMS',
        RULE,
        '',
    ])

    for item in sale.items:
        lines.append(item.product.name)
        lines.append(f"  {item.quantity} x {money(item.product.price)} = {money(item.line_total)}")
        lines.append('')

    tax_label = f"{tax_settings.name} ({percent(tax_settings.rate)}):"
    lines.extend([
        RULE,
        f"{'Subtotal:':<{LABEL_WIDTH}}{money(sale.subtotal)}",
        f"{tax_label:<{LABEL_WIDTH}}{money(sale.tax)}",
        f"{'TOTAL:':<{LABEL_WIDTH}}{money(sale.total)}",
        RULE,
        '',
    ])

    if receipt_settings.show_barcode:
        lines.extend([_centered(f"*{sale.receipt_number}*"), ''])

    lines.append(receipt_settings.footer or 'Thank you for your business!')
    return '\n'.join(lines) + '\n'
