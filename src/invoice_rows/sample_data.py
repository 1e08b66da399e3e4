"""Generate synthetic invoice lines with decimal-string fields."""

from decimal import ROUND_HALF_UP, Decimal
from typing import List
import numpy as np
from faker import Faker

from .line_item import DiscountInput, LineItem, TaxInput, prepare

CENT = Decimal("0.01")

# Common VAT rates (percent)
TAX_RATES = ["0", "5.5", "10", "20", "21"]
DISCOUNT_PERCENTS = ["5", "10", "12.5", "15", "25"]

SERVICE_NOUNS = [
    "Consulting", "Maintenance", "Installation", "Design", "Audit",
    "Support plan", "Training", "Hosting", "License", "Inspection",
]


def _money(value: float) -> str:
    """Format a generated float as a 2-place decimal string."""
    return str(Decimal(f"{value:.2f}"))


def generate_name(rng: np.random.Generator, fake: Faker) -> str:
    """Generate a short product or service name."""
    formats = [
        lambda: f"{rng.choice(SERVICE_NOUNS)} - {fake.word().capitalize()}",
        lambda: fake.catch_phrase(),
        lambda: f"{fake.color_name()} {fake.word()} ({rng.integers(1, 99)} pcs)",
    ]
    return formats[int(rng.integers(0, len(formats)))]()


def generate_description(rng: np.random.Generator, fake: Faker) -> str:
    """Empty, one sentence, or a short paragraph."""
    roll = rng.random()
    if roll < 0.3:
        return ""
    if roll < 0.75:
        return fake.sentence(nb_words=int(rng.integers(4, 10)))
    return fake.paragraph(nb_sentences=int(rng.integers(2, 4)))


def generate_discount(rng: np.random.Generator, subtotal: Decimal):
    """No discount (60%), a percentage (25%) or a flat amount (15%)."""
    roll = rng.random()
    if roll < 0.60:
        return None
    if roll < 0.85:
        return DiscountInput(percent=str(rng.choice(DISCOUNT_PERCENTS)))
    amount = (subtotal * Decimal(str(round(float(rng.uniform(0.02, 0.2)), 2)))).quantize(CENT)
    return DiscountInput(amount=str(amount))


def generate_tax(rng: np.random.Generator):
    """No tax (10%), a fixed amount (10%) or a percentage (80%)."""
    roll = rng.random()
    if roll < 0.10:
        return None
    if roll < 0.20:
        return TaxInput(amount=_money(float(rng.uniform(1, 40))))
    return TaxInput(percent=str(rng.choice(TAX_RATES)))


def generate_line_item(rng: np.random.Generator, fake: Faker) -> LineItem:
    unit_cost = _money(float(rng.uniform(5, 2500)))
    quantity = str(rng.choice([1, 1, 1, 2, 3, 5, 10, 12]))
    if rng.random() < 0.1:
        quantity = f"{float(rng.uniform(0.5, 40)):.1f}"  # hours

    subtotal = Decimal(unit_cost) * Decimal(quantity)
    item = LineItem(
        name=generate_name(rng, fake),
        description=generate_description(rng, fake),
        unit_cost=unit_cost,
        quantity=quantity,
        paid_incl_vat="0",
        discount=generate_discount(rng, subtotal),
        tax=generate_tax(rng),
    )

    # Settled amounts are what upstream billing would have rounded to cents
    line = prepare(item)
    item.paid_incl_vat = str(line.grand_total().quantize(CENT, rounding=ROUND_HALF_UP))
    item.paid_excl_vat = str(line.subtotal_excl_tax_incl_discount().quantize(CENT, rounding=ROUND_HALF_UP))
    return item


def generate_line_items(rng: np.random.Generator, fake: Faker, num_items: int = 8) -> List[LineItem]:
    """Generate num_items raw line items."""
    return [generate_line_item(rng, fake) for _ in range(num_items)]


def make_generators(seed: int):
    """Seeded numpy Generator and Faker instance."""
    rng = np.random.default_rng(seed)
    fake = Faker()
    fake.seed_instance(int(rng.integers(0, 2**31)))
    return rng, fake
