from app.core.database import SessionLocal
from app.core.security import create_access_token
from app.models.medicine import Medicine
from app.models.user import User


class FakeRedis:
    """In-process stand-in for the handful of redis commands the cache layer uses."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.deleted: list[str] = []

    def ping(self):
        return True

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    def delete(self, *keys):
        self.deleted.extend(keys)
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed


def persist(obj):
    """Insert a row in its own short transaction and hand back a detached copy."""
    with SessionLocal() as session:
        session.add(obj)
        session.commit()
        session.refresh(obj)
        session.expunge(obj)
    return obj


def token_for(user: User, **kwargs) -> str:
    return create_access_token(
        subject=str(user.id),
        username=user.username,
        role=user.role,
        name=user.name,
        **kwargs,
    )


def auth_header(user: User, **kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user, **kwargs)}"}


def get_quantity(medicine_id) -> int:
    with SessionLocal() as session:
        return session.get(Medicine, medicine_id).quantity


def line(medicine: Medicine, quantity: int, price: str | None = None) -> dict:
    """One billing-form line for `medicine`."""
    return {
        "medicineId": str(medicine.id),
        "name": medicine.medicine_name,
        "dosage": "1-0-1",
        "quantity": quantity,
        "price": price if price is not None else str(medicine.mrp),
    }
