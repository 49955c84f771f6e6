
"""Gerador de "PIX copia e cola" (mock, estilo BR Code).

Não é conformidade com o padrão do BCB: serve para demonstração. Só consome o
valor final do pedido (subtotal + taxa) e o número do pedido.
"""
from __future__ import annotations
import re
from decimal import Decimal, ROUND_HALF_UP
from kink import di
from ...core.settings import Settings
from ...ports.interfaces import PixPayloadDTO

COPY_PASTE_WIDTH = 50

PIX_KEY_PATTERNS = [
    re.compile(r"^\d{11}$|^\d{14}$"),  # CPF/CNPJ
    re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$"),  # e-mail
    re.compile(r"^\d{10,11}$"),  # telefone com DDD
    re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.I),  # chave aleatória
]

def crc16_ccitt(data: str) -> str:
    """CRC16-CCITT (poly 0x1021, init 0xFFFF) em 4 dígitos hex maiúsculos."""
    crc = 0xFFFF
    for ch in data.encode("utf-8"):
        crc ^= ch << 8
        for _ in range(8):
            crc = ((crc << 1) ^ 0x1021) if crc & 0x8000 else (crc << 1)
            crc &= 0xFFFF
    return f"{crc:04X}"

def _tlv(tag: str, value: str) -> str:
    return f"{tag}{len(value):02d}{value}"

def is_valid_pix_key(key: str) -> bool:
    """Aceita CPF, CNPJ, e-mail, telefone ou chave aleatória (UUID)."""
    return any(p.match(key or "") for p in PIX_KEY_PATTERNS)

class PixService:
    """Monta payload, QR (o próprio payload) e texto copia e cola."""
    def __init__(self, settings: Settings | None = None):
        self.s = settings or di[Settings]

    def build_payload(self, order_id: str, amount: Decimal, description: str | None = None) -> str:
        amount_txt = str(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
        description = description or f"Pedido {order_id} - Italicita Delivery"
        additional = _tlv("05", description) + _tlv("54", amount_txt)
        body = "".join([
            "000201",
            _tlv("26", _tlv("00", "br.gov.bcb.pix") + _tlv("01", self.s.pix_key)),
            "52040000",
            "5303986",
            "5802BR",
            _tlv("59", self.s.pix_recipient[:25].upper()),
            _tlv("60", self.s.pix_city[:15].upper()),
            _tlv("62", additional),
            "6304",
        ])
        return body + crc16_ccitt(body)

    def generate(self, order_id: str, amount: Decimal) -> PixPayloadDTO:
        payload = self.build_payload(order_id, amount)
        chunks = [payload[i:i + COPY_PASTE_WIDTH] for i in range(0, len(payload), COPY_PASTE_WIDTH)]
        return PixPayloadDTO(payload=payload, qr_code=payload, copy_paste="\n".join(chunks))
