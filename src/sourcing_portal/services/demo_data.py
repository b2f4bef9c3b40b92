"""
sourcing_portal.services.demo_data

Random demo requests for local development (`POST /api/reset-data`).
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import date, timedelta

from sourcing_portal.db.models import RequestCategory

_TITLES = (
    "Emergency Medical Supplies",
    "Hospital Beds Procurement",
    "Surgical Equipment Update",
    "Laboratory Testing Kits",
    "Patient Monitoring Systems",
    "Sterilization Equipment",
    "Medical Waste Management",
    "Diagnostic Imaging Devices",
    "Respiratory Care Equipment",
    "Pharmaceutical Storage System",
)

_DESCRIPTIONS = (
    "Urgent procurement needed for essential medical supplies",
    "Modern hospital beds with advanced features required",
    "Upgrading surgical equipment for multiple operating rooms",
    "Comprehensive testing kits for various medical tests",
    "Advanced patient monitoring systems for ICU",
    "Industrial-grade sterilization equipment for medical instruments",
    "Efficient medical waste management system needed",
    "State-of-the-art diagnostic imaging equipment",
    "High-quality respiratory care equipment for critical care",
    "Temperature-controlled pharmaceutical storage solutions",
)

_REQUIREMENTS = (
    "Must meet ISO standards",
    "CE certification required",
    "FDA approved products only",
    "Warranty minimum 2 years",
    "Training and support included",
    "Express delivery required",
    "Installation service included",
    "Regular maintenance support",
    "Compatible with existing systems",
    "Energy efficient solutions preferred",
)


@dataclass(frozen=True, slots=True)
class DemoRequest:
    title: str
    category: RequestCategory
    description: str
    quantity: int
    deadline: date
    requirements: str


def generate_demo_requests(
    *, today: date, rng: random.Random | None = None
) -> list[DemoRequest]:
    rng = rng or random.Random()
    categories = list(RequestCategory)
    return [
        DemoRequest(
            title=title,
            category=rng.choice(categories),
            description=description,
            quantity=rng.randint(1, 100),
            # Deadlines land 30 to 89 days out.
            deadline=today + timedelta(days=rng.randint(30, 89)),
            requirements=requirement,
        )
        for title, description, requirement in zip(
            _TITLES, _DESCRIPTIONS, _REQUIREMENTS, strict=True
        )
    ]
