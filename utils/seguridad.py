# utils/seguridad.py
# ---------------------------
# Hash de contraseñas de usuario (bcrypt, costo fijo).
# ---------------------------

from passlib.context import CryptContext

# Costo fijo: 2^10 rondas
BCRYPT_ROUNDS = 10

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Compara una contraseña en texto plano contra su hash almacenado.
    El API no expone login; se usa en pruebas y en tareas de operación.
    """
    return pwd_context.verify(password, password_hash)
