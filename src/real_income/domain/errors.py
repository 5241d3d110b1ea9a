from __future__ import annotations

from typing import Optional


class RealIncomeError(RuntimeError):
    """Base de todos os erros do core. Todos são terminais para a execução corrente."""
    pass


class ParseError(RealIncomeError, ValueError):
    """Texto de período informado pelo usuário fora do formato esperado."""

    BAD_FORMAT = "bad_format"
    OUT_OF_RANGE = "out_of_range"

    def __init__(self, message: str, kind: str = BAD_FORMAT):
        super().__init__(message)
        self.kind = kind


class HttpError(RealIncomeError):
    """Resposta remota não-2xx. O core não faz retry."""

    def __init__(self, status: int, body: str = "", url: Optional[str] = None):
        self.status = status
        self.body = body
        self.url = url
        msg = f"HTTP {status}"
        if url:
            msg += f" for {url}"
        if body:
            msg += f"\nBody:\n{body}"
        super().__init__(msg)


class ExtractionError(RealIncomeError):
    """Documento (XML/JSON) ou atributo malformado; fatal para aquele documento."""
    pass


class EmptyResultError(RealIncomeError):
    """Documento bem formado mas sem registros utilizáveis (ou nenhum no intervalo pedido)."""
    pass


class RangeError(RealIncomeError, ValueError):
    """Período final anterior ao inicial."""
    pass


class InvalidValueError(RealIncomeError, ValueError):
    """Valor numérico fisicamente sem sentido (índice <= 0, valor nominal <= 0, ...)."""
    pass


class InputError(RealIncomeError, ValueError):
    """Parâmetro obrigatório da execução ausente ou vazio (ex.: código do país)."""
    pass


class TransportError(RealIncomeError):
    """Falha de rede sem resposta HTTP (conexão, timeout, retries esgotados)."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)
