"""
psvault/exceptions.py — Erros de domínio.

Stores devolvem None para "não existe"; quem transforma isso em
NotFoundError / UnauthorizedError são os controllers (via guard).
Falhas de banco chegam aqui como StoreError.
"""


class PsVaultError(Exception):
    """Base de todos os erros do psvault."""


class NotFoundError(PsVaultError):
    def __init__(self, resource: str, resource_id: str | None = None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} não encontrado: {resource_id}")


class UnauthorizedError(PsVaultError):
    """O recurso existe mas pertence a outro usuário."""

    def __init__(self, resource: str, resource_id: str | None = None, user_id: str | None = None):
        self.resource = resource
        self.resource_id = resource_id
        self.user_id = user_id
        super().__init__(f"Acesso não autorizado a {resource} {resource_id}")


class StoreError(PsVaultError):
    """Falha de armazenamento ou de transação."""


class IntegrityViolation(StoreError):
    """Estado persistido quebra uma invariante (ex.: secret sem metadata)."""
