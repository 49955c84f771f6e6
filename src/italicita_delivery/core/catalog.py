
"""Carregador de catálogo (JSON) com opções normalizadas por id.

- Fonte: data/catalog.json (ou ITD_CATALOG_PATH)
- Pratos referenciam opções por id ("allowedSizes": ["size-1", ...]) ou trazem
  o objeto completo, como no feed do backend.
- Fornece: load_catalog(), parse_catalog(), parse_menu_items()
"""
from __future__ import annotations
from decimal import Decimal
from typing import Any, Dict, List
import json
from ..domain.models import MenuItem
from .logging import get_logger

log = get_logger()

# campo do prato -> chave do bloco "options"
OPTION_FIELDS = {
    "allowedPasta": "pasta",
    "allowedSizes": "sizes",
    "allowedSauces": "sauces",
    "allowedAddOns": "addOns",
    "allowedExtras": "extras",
}

def _resolve_options(raw_item: Dict[str, Any], options: Dict[str, List[dict]]) -> Dict[str, Any]:
    item = dict(raw_item)
    for field, kind in OPTION_FIELDS.items():
        index = {o["id"]: o for o in options.get(kind, [])}
        resolved = []
        for ref in item.get(field) or []:
            if isinstance(ref, str):
                if ref not in index:
                    raise ValueError(f"opção desconhecida {ref!r} em {item.get('id')}.{field}")
                resolved.append(index[ref])
            else:
                resolved.append(ref)
        item[field] = resolved
    return item

def parse_menu_items(raw_items: List[Dict[str, Any]]) -> List[MenuItem]:
    """Valida pratos que já trazem as opções embutidas (feed do backend)."""
    return [MenuItem.model_validate(it) for it in raw_items]

def parse_catalog(data: Dict[str, Any]) -> List[MenuItem]:
    """Resolve referências de opções e valida cada prato, preservando a ordem."""
    options = data.get("options", {})
    return [MenuItem.model_validate(_resolve_options(it, options)) for it in data.get("items", [])]

def load_catalog(path: str) -> List[MenuItem]:
    """Carrega o catálogo do disco. Em caso de erro, loga e retorna catálogo vazio."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f, parse_float=Decimal)
        items = parse_catalog(data)
    except (OSError, ValueError) as exc:
        log.error("catalog_load_failed", path=path, error=str(exc))
        return []
    log.info("catalog_loaded", path=path, items_count=len(items))
    return items
