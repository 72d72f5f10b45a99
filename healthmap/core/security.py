from passlib.context import CryptContext
from healthmap.core.config import settings

# bcrypt cost factor; hashes carry their own salt and rounds
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)
