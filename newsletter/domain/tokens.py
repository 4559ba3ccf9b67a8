# newsletter/domain/tokens.py
import secrets
import string

TOKEN_LENGTH = 25
TOKEN_ALPHABET = string.ascii_letters + string.digits


def generate_subscription_token() -> str:
    """Generate a bearer token for the confirmation link"""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
