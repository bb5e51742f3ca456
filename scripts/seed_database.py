"""
Database Seeding Script for Realtor.uz
Generates realistic Tashkent listings for development

Usage:
    python scripts/seed_database.py --users 10 --properties 100
    python scripts/seed_database.py --reset  # Clear and reseed

Follow up with seed_metro_stations.py, update_nearest_metro.py and
seed_price_history.py to fill in the derived data.
"""

import random
from datetime import datetime, timedelta
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.batch import batch_session, run_script
from app.models.favorite import Favorite
from app.models.price_history import PriceHistory
from app.models.property import Property, PropertyType, PropertyStatus, ListingType, Currency
from app.models.property_analytics import PropertyAnalytics
from app.models.user import User, UserRole
from app.core.security import get_password_hash


# Tashkent districts with approximate centers
TASHKENT_DISTRICTS = {
    "Chilanzar": (41.2856, 69.2034),
    "Yunusabad": (41.3640, 69.2870),
    "Mirzo Ulugbek": (41.3380, 69.3340),
    "Yakkasaray": (41.2920, 69.2550),
    "Mirabad": (41.2960, 69.2790),
    "Shaykhantahur": (41.3260, 69.2360),
    "Almazar": (41.3480, 69.2110),
    "Uchtepa": (41.2950, 69.1780),
    "Sergeli": (41.2270, 69.2210),
    "Yashnabad": (41.2980, 69.3380),
}

STREETS = ["Amir Temur", "Bunyodkor", "Navoiy", "Shota Rustaveli", "Mustaqillik", "Bobur", "Katartal"]

TITLE_TEMPLATES = {
    PropertyType.APARTMENT: "{}-комнатная квартира, {} м², {}",
    PropertyType.HOUSE: "Дом {} комнат, {} м², {}",
    PropertyType.CONDO: "Квартира в ЖК, {} комнаты, {} м², {}",
    PropertyType.TOWNHOUSE: "Таунхаус {} комнат, {} м², {}",
}

DESCRIPTIONS = [
    "Светлая квартира в тихом районе. Рядом школа, детский сад, магазины и остановки транспорта.",
    "Свежий ремонт, встроенная кухня, кондиционеры. Подходит для семьи.",
    "Удобное расположение, несколько минут до метро. Закрытый двор и парковка.",
    "Хороший вариант для инвестиций: район активно развивается.",
]

# Sale prices per square meter in YE
PRICE_PER_SQM = {
    "Mirabad": (1300, 2200),
    "Yakkasaray": (1200, 2000),
    "Yunusabad": (1000, 1600),
    "Mirzo Ulugbek": (1000, 1700),
    "Shaykhantahur": (900, 1500),
}
DEFAULT_PRICE_PER_SQM = (700, 1200)


async def create_users(db: AsyncSession, count: int = 10) -> list[User]:
    """Create test users with different roles"""
    print(f"Creating {count} users...")
    users = []

    for i in range(count // 3):
        agent = User(
            email=f"agent{i+1}@realtor.uz",
            hashed_password=get_password_hash("Agent123!"),
            role=UserRole.AGENT,
            first_name=f"Agent{i+1}",
            last_name="Realtor",
            is_active=True,
            is_verified=True,
            phone=f"+99890{random.randint(1000000, 9999999)}",
        )
        db.add(agent)
        users.append(agent)

    for i in range(count - len(users)):
        user = User(
            email=f"user{i+1}@realtor.uz",
            hashed_password=get_password_hash("User1234!"),
            role=UserRole.USER,
            first_name=f"User{i+1}",
            last_name="Test",
            is_active=True,
            is_verified=random.choice([True, False]),
            phone=f"+99893{random.randint(1000000, 9999999)}",
        )
        db.add(user)
        users.append(user)

    await db.flush()
    print(f"✅ Created {len(users)} users")
    return users


def generate_coordinates(base_lat: float, base_lng: float) -> tuple[float, float]:
    """Generate random coordinates near a base location"""
    # Random offset within ~2km
    lat_offset = random.uniform(-0.018, 0.018)
    lng_offset = random.uniform(-0.018, 0.018)
    return (
        round(base_lat + lat_offset, 6),
        round(base_lng + lng_offset, 6)
    )


async def create_properties(db: AsyncSession, users: list[User], count: int = 100) -> list[Property]:
    """Create test properties with realistic data"""
    print(f"Creating {count} properties...")
    properties = []

    for i in range(count):
        district = random.choice(list(TASHKENT_DISTRICTS))
        lat, lng = generate_coordinates(*TASHKENT_DISTRICTS[district])

        prop_type = random.choice(list(TITLE_TEMPLATES))
        listing_type = random.choices(
            [ListingType.SALE, ListingType.RENT, ListingType.DAILY_RENT],
            weights=[0.6, 0.3, 0.1]
        )[0]

        if prop_type in (PropertyType.HOUSE, PropertyType.TOWNHOUSE):
            rooms = random.choice([3, 4, 4, 5, 6])
            area = rooms * random.randint(25, 40)
            floor = None
            total_floors = random.choice([1, 2, 3])
        else:
            rooms = random.choice([1, 2, 2, 3, 3, 4])
            area = rooms * random.randint(18, 30)
            total_floors = random.randint(4, 16)
            floor = random.randint(1, total_floors)

        low, high = PRICE_PER_SQM.get(district, DEFAULT_PRICE_PER_SQM)
        if listing_type == ListingType.SALE:
            price = round(area * random.randint(low, high), -2)
        elif listing_type == ListingType.RENT:
            price = round(area * random.uniform(4, 9), -1)  # YE per month
        else:
            price = random.randint(25, 80)  # YE per day

        status = random.choices(
            [PropertyStatus.ACTIVE, PropertyStatus.PENDING, PropertyStatus.SOLD, PropertyStatus.INACTIVE],
            weights=[0.8, 0.08, 0.07, 0.05]
        )[0]
        if status == PropertyStatus.SOLD and listing_type != ListingType.SALE:
            status = PropertyStatus.RENTED

        created_at = datetime.utcnow() - timedelta(days=random.randint(1, 90))

        prop = Property(
            user_id=random.choice(users).id,
            title=TITLE_TEMPLATES[prop_type].format(rooms, int(area), district),
            description=random.choice(DESCRIPTIONS),
            property_type=prop_type,
            listing_type=listing_type,
            status=status,
            price=int(price),
            currency=Currency.YE,
            area=float(area),
            rooms=rooms,
            floor=floor,
            total_floors=total_floors,
            address=f"ул. {random.choice(STREETS)}, {random.randint(1, 150)}",
            city="Tashkent",
            district=district,
            latitude=lat,
            longitude=lng,
            view_count=random.randint(0, 500) if status == PropertyStatus.ACTIVE else 0,
            created_at=created_at,
            updated_at=created_at,
        )

        db.add(prop)
        properties.append(prop)

        if (i + 1) % 20 == 0:
            print(f"  Created {i + 1}/{count} properties...")

    await db.flush()
    print(f"✅ Created {len(properties)} properties")
    return properties


async def seed_database(users_count: int = 10, properties_count: int = 100, reset: bool = False):
    """Main seeding function"""
    print("=" * 60)
    print("🌱 Database Seeding Script for Realtor.uz")
    print("=" * 60)

    async with batch_session() as db:
        if reset:
            print("\n⚠️  Clearing existing data...")
            for model in (PropertyAnalytics, PriceHistory, Favorite, Property):
                await db.execute(delete(model))
            await db.execute(delete(User).where(User.role != UserRole.ADMIN))
            print("✅ Database cleared")

        print(f"\n📊 Creating test data:")
        print(f"  - Users: {users_count}")
        print(f"  - Properties: {properties_count}")
        print()

        users = await create_users(db, users_count)
        properties = await create_properties(db, users, properties_count)

    print("\n" + "=" * 60)
    print("✅ Database seeding completed successfully!")
    print("=" * 60)
    print(f"\n📈 Summary:")
    print(f"  - Total users: {len(users)}")
    print(f"  - Total properties: {len(properties)}")
    print(f"  - Active properties: {sum(1 for p in properties if p.status == PropertyStatus.ACTIVE)}")
    print(f"  - Districts covered: {len(TASHKENT_DISTRICTS)}")
    print()
    print("🔐 Test Credentials:")
    print("  Agent:  agent1@realtor.uz / Agent123!")
    print("  User:   user1@realtor.uz / User1234!")
    print("  Admin:  run scripts/create_admin.py")
    print()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seed the database with test data")
    parser.add_argument("--users", type=int, default=10, help="Number of users to create")
    parser.add_argument("--properties", type=int, default=100, help="Number of properties to create")
    parser.add_argument("--reset", action="store_true", help="Clear existing data before seeding")

    args = parser.parse_args()

    run_script("seed_database", lambda: seed_database(
        users_count=args.users,
        properties_count=args.properties,
        reset=args.reset
    ))
