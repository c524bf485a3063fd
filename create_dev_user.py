import asyncio
import sys
import os

# Add project root to path
sys.path.append(os.getcwd())

from src.common.constants import UserRole
from src.config import settings
from src.config.loader import get_project_root
from src.core.routes import RouteCreateDTO, RouteRepository
from src.core.users import UserRepository, hash_password
from src.infra.database import DatabaseManager

DEV_PASSWORD = "password123"

DEV_USERS = [
    ("driver1@example.com", "John Driver", UserRole.DRIVER, "+1234567890"),
    ("user1@example.com", "Jane User", UserRole.USER, "+0987654321"),
]

DEV_ROUTES = [
    RouteCreateDTO(
        name="Downtown Express",
        description="Fast route through downtown area",
        start_location="Central Station",
        end_location="Business District",
        estimated_duration_minutes=25,
    ),
    RouteCreateDTO(
        name="University Loop",
        description="Route serving university campus",
        start_location="Main Campus",
        end_location="Student Housing",
        estimated_duration_minutes=15,
    ),
]


async def main():
    db = DatabaseManager(dsn=settings.database.dsn, min_size=1, max_size=1)
    await db.connect()
    print("Connected to DB")

    try:
        await db.apply_schema(get_project_root() / "migrations" / "init.sql")

        users = UserRepository(db)
        routes = RouteRepository(db)

        driver = None
        for email, name, role, phone in DEV_USERS:
            user = await users.get_by_email(email)
            if user is None:
                user = await users.create(email, hash_password(DEV_PASSWORD), name, role, phone)
                print(f"User {email} created")
            else:
                print(f"User {email} already exists")
            if role == UserRole.DRIVER:
                driver = user

        existing = {route.name for route in await routes.list_by_driver(driver.id)}
        for dto in DEV_ROUTES:
            if dto.name in existing:
                continue
            route = await routes.create(driver.id, dto)
            print(f"Route {route.name} created ({route.id})")
    finally:
        await db.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
