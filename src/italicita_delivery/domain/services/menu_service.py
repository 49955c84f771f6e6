
"""Serviço de cardápio sobre o catálogo carregado (leitura apenas)."""
from __future__ import annotations
import unicodedata
from typing import Iterable, List
from ..errors import MenuItemNotFoundError
from ..models import MenuItem, ProductCategory

def _fold(text: str) -> str:
    """Minúsculas sem acento, para busca."""
    norm = unicodedata.normalize("NFKD", text or "")
    return "".join(c for c in norm if not unicodedata.combining(c)).casefold()

class MenuService:
    """Consulta o catálogo preservando a ordem do feed."""
    def __init__(self, items: Iterable[MenuItem]):
        self._items: List[MenuItem] = list(items)

    def list_items(self, category: ProductCategory | str | None = None, only_available: bool = True) -> List[MenuItem]:
        cat = ProductCategory(category) if category else None
        return [
            it for it in self._items
            if (cat is None or it.category == cat) and (it.is_available or not only_available)
        ]

    def get_item(self, item_id: str) -> MenuItem:
        for it in self._items:
            if it.id == item_id:
                return it
        raise MenuItemNotFoundError(item_id)

    def categories(self) -> List[ProductCategory]:
        """Categorias presentes no catálogo, na ordem do enum."""
        present = {it.category for it in self._items}
        return [c for c in ProductCategory if c in present]

    def search(self, text: str) -> List[MenuItem]:
        """Busca por nome, descrição ou tag (ignora caixa e acentos)."""
        q = _fold(text).strip()
        if not q:
            return self.list_items()
        return [
            it for it in self.list_items()
            if q in _fold(it.name) or q in _fold(it.description) or any(q in _fold(t) for t in it.tags)
        ]
