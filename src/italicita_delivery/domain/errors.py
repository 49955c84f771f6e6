
"""Hierarquia de erros do storefront (mapeados para HTTP na camada Flask)."""


class StorefrontError(Exception):
    """Erro base do domínio."""


class InvalidSelectionError(StorefrontError):
    """Seleção de personalização inválida (tamanho ausente, opção indisponível etc.)."""


class MenuItemNotFoundError(StorefrontError):
    """Prato não encontrado no catálogo."""


class CatalogUnavailableError(StorefrontError):
    """Catálogo remoto indisponível ou resposta inválida."""


class InvalidCheckoutError(StorefrontError):
    """Dados de entrega/pagamento incompletos."""


class EmptyCartError(StorefrontError):
    """Checkout solicitado com carrinho vazio."""


class OrderSubmissionError(StorefrontError):
    """Falha ao enviar o pedido ao backend (rede ou validação).

    Nunca deve limpar o carrinho: o cliente precisa poder tentar de novo.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PixSessionExpiredError(StorefrontError):
    """Cobrança PIX expirada antes da confirmação."""


class SessionNotFoundError(StorefrontError):
    """Sessão de carrinho inexistente ou já encerrada."""


class PaymentNotFoundError(StorefrontError):
    """Cobrança PIX inexistente para esta sessão."""
