"""Seed script to populate the database with sample data."""

from datetime import UTC, datetime, timedelta

from tavrezsi import models  # noqa: F401
from tavrezsi.core.database import Base, SessionLocal, engine
from tavrezsi.models import (
    Meter,
    MeterType,
    Property,
    PropertyTenant,
    Reading,
    User,
    UserRole,
)
from tavrezsi.services.auth import get_password_hash


def seed_database() -> None:
    """Seed the database with sample data."""
    Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        # Check if data already exists
        if db.query(User).first():
            print("Database already has data. Skipping seed.")
            return

        print("Seeding database...")

        admin = User(
            username="admin",
            email="admin@tavrezsi.hu",
            name="Admin User",
            role=UserRole.ADMIN,
            hashed_password=get_password_hash("admin123456"),
        )
        owner = User(
            username="owner",
            email="owner@tavrezsi.hu",
            name="Kovács Anna",
            role=UserRole.OWNER,
            hashed_password=get_password_hash("owner123456"),
        )
        tenant = User(
            username="tenant",
            email="tenant@tavrezsi.hu",
            name="Nagy Péter",
            role=UserRole.TENANT,
            hashed_password=get_password_hash("tenant123456"),
        )
        db.add_all([admin, owner, tenant])
        db.flush()

        print(f"Created users: admin (ID: {admin.id}), owner (ID: {owner.id}), tenant (ID: {tenant.id})")

        property_obj = Property(
            name="Andrássy út 12.",
            address="1061 Budapest, Andrássy út 12.",
            owner_id=owner.id,
        )
        db.add(property_obj)
        db.flush()

        print(f"Created property: {property_obj.name} (ID: {property_obj.id})")

        now = datetime.now(UTC)
        water_meter = Meter(
            identifier="WM-0001",
            name="Hidegvíz",
            type=MeterType.WATER,
            unit="m3",
            property_id=property_obj.id,
            last_certified=now - timedelta(days=365),
            next_certification=now + timedelta(days=365 * 5),
        )
        electricity_meter = Meter(
            identifier="EM-0001",
            name="Villany",
            type=MeterType.ELECTRICITY,
            unit="kWh",
            property_id=property_obj.id,
        )
        db.add_all([water_meter, electricity_meter])
        db.flush()

        db.add(PropertyTenant(property_id=property_obj.id, tenant_id=tenant.id, is_active=True))

        # A month of daily IoT readings per meter
        for day in range(30, 0, -1):
            timestamp = now - timedelta(days=day)
            db.add(Reading(meter_id=water_meter.id, reading=120 + (30 - day), timestamp=timestamp))
            db.add(
                Reading(
                    meter_id=electricity_meter.id,
                    reading=5400 + (30 - day) * 7,
                    timestamp=timestamp,
                )
            )

        db.commit()
        print("Seed complete.")


if __name__ == "__main__":
    seed_database()
