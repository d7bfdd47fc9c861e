import secrets
from keycove import encrypt, decrypt


def decrypt_secret(value: str, secret_key: str) -> str:
  return decrypt(value, secret_key)

def encrypt_secret(value: str, secret_key: str) -> str:
  return encrypt(value, secret_key)

def generate_session_token() -> str:
  return secrets.token_urlsafe(32)
