"""Sign convention and money arithmetic shared by the ledger services.

Expense amounts are stored negated; every other transaction type stores
positive magnitudes. Direction-aware sums (reconciliation balances) and
spent-vs-planned comparisons (budget execution) derive their signs here, and
nowhere else.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

from bookkeep.domain.entities import LineAmounts, TransactionType

Number = Union[Decimal, int, str, float]

MONEY_QUANTUM = Decimal("0.01")
EPSILON = Decimal("0.01")
ZERO = Decimal("0")

NEGATED_TYPES = frozenset({TransactionType.EXPENSE})
INFLOW_TYPES = frozenset(
    {TransactionType.SALE, TransactionType.INCOME, TransactionType.INCOMING_PAYMENT}
)
OUTFLOW_TYPES = frozenset(
    {TransactionType.EXPENSE, TransactionType.PURCHASE, TransactionType.OUTGOING_PAYMENT}
)


def to_decimal(value: Optional[Number]) -> Decimal:
    """Convert a loosely typed number to Decimal, treating None as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def to_money(value: Optional[Number]) -> Decimal:
    """Round a value to cents."""
    return to_decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def amounts_equal(left: Number, right: Number) -> bool:
    """Compare two money values within the rounding epsilon."""
    return abs(to_decimal(left) - to_decimal(right)) <= EPSILON


def allows_negative_total(txn_type: TransactionType) -> bool:
    """Return True for types whose amounts are stored negated."""
    return TransactionType(txn_type) in NEGATED_TYPES


def normalize_amount(txn_type: TransactionType, amount: Number) -> Decimal:
    """Apply the storage sign for ``txn_type`` to a caller-entered amount."""
    magnitude = abs(to_decimal(amount))
    if allows_negative_total(txn_type):
        return -magnitude
    return magnitude


def unsigned_amount(value: Number) -> Decimal:
    """Return the unsigned size of a stored amount."""
    return abs(to_decimal(value))


def signed_amount(txn_type: TransactionType, total: Number) -> Decimal:
    """Return ``total`` signed by money direction: inflows positive, outflows negative."""
    magnitude = abs(to_decimal(total))
    if TransactionType(txn_type) in OUTFLOW_TYPES:
        return -magnitude
    return magnitude


def normalized_execution_amount(total: Number, is_expense_concept: bool) -> Decimal:
    """Return a detail total as counted against a budget line.

    Expense concepts count as absolute values so that budgets compare spent
    vs. planned in positive terms.
    """
    value = to_decimal(total)
    return abs(value) if is_expense_concept else value


def remaining_balance(total: Number, payments: Number) -> Decimal:
    """Return ``max(total - payments, 0)``."""
    balance = to_decimal(total) - to_decimal(payments)
    return balance if balance > ZERO else ZERO


def calculate_line_amounts(
    quantity: Number,
    price: Number,
    tax_percentage: Number = 0,
    discount_percentage: Number = 0,
    additional_charges: Number = 0,
) -> LineAmounts:
    """Compute net, tax, discount and total for one line.

    total = net + tax - discount + additional_charges, where
    net = quantity * price and tax/discount are percentages of net.
    """
    net = to_decimal(quantity) * to_decimal(price)
    tax = net * to_decimal(tax_percentage) / Decimal(100)
    discount = net * to_decimal(discount_percentage) / Decimal(100)
    charges = to_decimal(additional_charges)
    return LineAmounts(
        net=to_money(net),
        tax=to_money(tax),
        discount=to_money(discount),
        additional_charges=to_money(charges),
        total=to_money(net + tax - discount + charges),
    )


def aggregate_lines(lines: Iterable[LineAmounts]) -> LineAmounts:
    """Sum line amounts into transaction-level totals."""
    net = tax = discount = charges = total = ZERO
    for line in lines:
        net += line.net
        tax += line.tax
        discount += line.discount
        charges += line.additional_charges
        total += line.total
    return LineAmounts(
        net=net, tax=tax, discount=discount, additional_charges=charges, total=total
    )


def balance_invariant_violations(
    total: Number, payments: Number, balance: Number
) -> list[str]:
    """Return the reasons a total/payments/balance triple is inconsistent.

    Checked on magnitudes because expense rows carry negative totals.
    """
    total_d = to_decimal(total)
    payments_d = to_decimal(payments)
    balance_d = to_decimal(balance)
    reasons = []
    if balance_d < ZERO and total_d >= ZERO:
        reasons.append("balance is negative")
    if abs(balance_d) > abs(total_d) + EPSILON:
        reasons.append("balance exceeds total")
    if not amounts_equal(payments_d + balance_d, total_d):
        reasons.append("payments + balance does not equal total")
    return reasons
