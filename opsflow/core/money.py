"""Calcul des montants des devis et factures.

Invariant au repos:
    total == subtotal + subtotal * tax / 100 - discount
avec des totaux de ligne égaux à quantity * unit_price, arrondis au centime.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Protocol

CENT = Decimal("0.01")


class PricedLine(Protocol):
    quantity: Decimal
    unit_price: Decimal


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


def to_money(value) -> Decimal:
    """Convertit en Decimal arrondi au centime (arrondi commercial)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity, unit_price) -> Decimal:
    return to_money(Decimal(str(quantity)) * Decimal(str(unit_price)))


def compute_totals(lines: Iterable[PricedLine], tax=0, discount=0) -> Totals:
    """Recalcule sous-total et total à partir des lignes.

    Args:
        lines: Lignes exposant ``quantity`` et ``unit_price``.
        tax: Taux de taxe en pourcentage (ex: 20 pour 20 %).
        discount: Remise absolue.
    """
    tax = to_money(tax)
    discount = to_money(discount)
    subtotal = to_money(sum((line_total(l.quantity, l.unit_price) for l in lines), Decimal("0")))
    total = to_money(subtotal + subtotal * tax / Decimal("100") - discount)
    return Totals(subtotal=subtotal, tax=tax, discount=discount, total=total)


def totals_are_consistent(lines: Iterable[PricedLine], subtotal, tax, discount, total) -> bool:
    expected = compute_totals(lines, tax=tax, discount=discount)
    return expected.subtotal == to_money(subtotal) and expected.total == to_money(total)
