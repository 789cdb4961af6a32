from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.accounts.models import Company, Membership, Role
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.pricing.models import Currency, ExchangeRate, PricingTier
from modules.pricing.repositories.django_repository import PricingDjangoRepository
from modules.pricing.services import PricingService
from modules.statuses.repositories.django_repository import StatusDjangoRepository
from modules.statuses.services import StatusService

CURRENCIES = [
    ("AED", "UAE Dirham", "AED"),
    ("USD", "US Dollar", "$"),
    ("EUR", "Euro", "€"),
    ("SAR", "Saudi Riyal", "SAR"),
]

RATES_TO_AED = {
    "USD": Decimal("3.672500"),
    "EUR": Decimal("3.980000"),
    "SAR": Decimal("0.979000"),
}

TEAM = [
    ("admin@printshop.example.com", "Shop Admin", Role.ADMIN),
    ("sales@printshop.example.com", "Sara Sales", Role.SALES),
    ("designer@printshop.example.com", "Dana Designer", Role.DESIGNER),
    ("production@printshop.example.com", "Paul Production", Role.PRODUCTION),
    ("accountant@printshop.example.com", "Amal Accountant", Role.ACCOUNTANT),
]

ITEMS = [
    ("Business cards (500)", Decimal("120.00")),
    ("A2 poster", Decimal("45.00")),
    ("Roll-up banner", Decimal("350.00")),
    ("Sticker sheet", Decimal("15.00")),
    ("Flyers A5 (1000)", Decimal("280.00")),
]

CLIENTS = [
    ("Brain Socket LLC", "orders@brainsocket.example.com"),
    ("Jane O'Brien", "jane@example.com"),
    ("Blue Dune Cafe", "hello@bluedune.example.com"),
    ("Atlas Events", "events@atlas.example.com"),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--statuses-only",
            action="store_true",
            help="Only add missing default order statuses to every company.",
        )
        parser.add_argument(
            "--orders",
            type=int,
            default=8,
            help="Number of sample orders to create for the demo company.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        status_service = StatusService(StatusDjangoRepository())

        if options["statuses_only"]:
            created = 0
            for company in Company.objects.all():
                created += len(status_service.seed_defaults(company.id))
            self.stdout.write(self.style.SUCCESS(f"Statuses created: {created}"))
            return

        self.stdout.write("Seeding development data...")
        currencies = self._seed_currencies()
        company = self._seed_company(currencies["AED"])
        statuses_created = len(status_service.seed_defaults(company.id))
        self._seed_pricing(company, currencies)
        members = self._seed_team(company)
        orders_created = self._seed_orders(company, currencies, members, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"company={company.name}, "
                f"statuses={statuses_created}, "
                f"members={len(members)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_currencies(self) -> dict[str, Currency]:
        self.stdout.write("Creating currencies...")
        currencies = {}
        for code, name, symbol in CURRENCIES:
            currency, _ = Currency.objects.get_or_create(
                code=code, defaults={"name": name, "symbol": symbol}
            )
            currencies[code] = currency
        return currencies

    def _seed_company(self, base_currency: Currency) -> Company:
        company, _ = Company.objects.get_or_create(
            name="Demo Print Shop",
            defaults={"currency": base_currency, "tax_rate": Decimal("5.00")},
        )
        return company

    def _seed_pricing(self, company: Company, currencies: dict[str, Currency]) -> None:
        self.stdout.write("Creating pricing tiers and exchange rates...")
        tiers = [
            ("Retail", "Walk-in customers", Decimal("0.00"), True),
            ("Corporate", "Contract clients", Decimal("10.00"), False),
            ("Rush", "Same-day jobs", Decimal("25.00"), False),
        ]
        for name, label, markup, is_default in tiers:
            PricingTier.objects.get_or_create(
                company=company,
                name=name,
                defaults={
                    "label": label,
                    "markup_percent": markup,
                    "is_default": is_default,
                },
            )
        for code, rate in RATES_TO_AED.items():
            currency = currencies[code]
            if not ExchangeRate.objects.for_company(company.id).filter(
                currency=currency, is_active=True
            ).exists():
                ExchangeRate.objects.create(
                    company=company,
                    currency=currency,
                    rate_to_company_currency=rate,
                )

    def _seed_team(self, company: Company) -> list[Membership]:
        self.stdout.write("Creating team members...")
        User = get_user_model()
        members = []
        for email, full_name, role in TEAM:
            user = User.objects.filter(username=email).first()
            if user is None:
                user = User.objects.create_user(
                    username=email, email=email, password=f"{role}12345"
                )
            membership, _ = Membership.objects.get_or_create(
                user=user,
                defaults={"company": company, "role": role, "full_name": full_name},
            )
            members.append(membership)
        return members

    def _seed_orders(
        self,
        company: Company,
        currencies: dict[str, Currency],
        members: list[Membership],
        count: int,
    ) -> int:
        self.stdout.write("Creating orders...")
        service = OrderService(
            OrderDjangoRepository(),
            StatusDjangoRepository(),
            PricingService(PricingDjangoRepository()),
        )
        sales = next(m for m in members if m.role == Role.SALES)
        created = 0
        for index in range(count):
            client_name, email = random.choice(CLIENTS)
            items = [
                CreateOrderItemDTO(
                    description=description,
                    quantity=random.randint(1, 5),
                    unit_price=price,
                )
                for description, price in random.sample(ITEMS, k=random.randint(1, 3))
            ]
            currency = random.choice([None, None, currencies["USD"], currencies["EUR"]])
            dto = CreateOrderDTO(
                client_name=client_name,
                email=email,
                delivery_date=timezone.localdate() + timedelta(days=random.randint(2, 14)),
                delivery_method=random.choice(["pickup", "delivery"]),
                needs_design=random.random() < 0.5,
                currency_id=currency.id if currency else None,
                items=items,
                idempotency_key=f"seed-{company.id}-{index}",
            )
            result = service.create_order(company, dto, user_id=sales.user_id)
            created += int(result.changed)
        return created
