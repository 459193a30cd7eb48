"""
psvault/middlewares/auth.py — Identidade do chamador.

Bearer JWT no header Authorization:
  - valida assinatura + expiração
  - `sub` vira o user_id usado em todas as checagens de posse
  - garante a linha em `users` (FK de vaults/devices)
"""
import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from psvault.services.jwt_service import verify_token

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> str:
    """Retorna o user_id do token. Lança 401 se ausente, inválido ou expirado."""
    if not credentials:
        raise _unauthorized("Token de autenticação ausente.")
    try:
        payload = verify_token(credentials.credentials, request.app.state.settings)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token expirado.")
    except jwt.InvalidTokenError:
        raise _unauthorized("Token inválido.")

    user_id = payload["sub"]
    await request.app.state.users.ensure(user_id, payload.get("email"))
    return user_id
