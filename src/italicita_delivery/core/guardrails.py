
"""Higienização dos campos livres do checkout (entrega e cartão)."""
import re

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
NON_DIGITS = re.compile(r"\D")
FIELD_MAX_LEN = 200

def sanitize_text(text: str | None, max_len: int = FIELD_MAX_LEN) -> str:
    """Colapsa espaços, tira caracteres de controle e corta em `max_len`."""
    cleaned = " ".join(CONTROL_CHARS.sub("", text or "").split())
    return cleaned[:max_len].rstrip()

def only_digits(text: str | None) -> str:
    """Mantém só dígitos (telefone, cartão, chave PIX CPF/CNPJ)."""
    return NON_DIGITS.sub("", text or "")

def mask_card_number(number: str | None) -> str:
    """`4111 1111 1111 1111` -> `************1111` (para logs)."""
    digits = only_digits(number)
    return "*" * max(0, len(digits) - 4) + digits[-4:]
