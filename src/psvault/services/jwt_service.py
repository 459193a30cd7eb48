"""
psvault/services/jwt_service.py — Validação (e emissão, para testes/ferramentas) de JWTs.

O psvault não faz login: o token chega pronto do provedor de sessão.
Aqui só conferimos assinatura + expiração e extraímos o `sub` (user id).
"""
from datetime import datetime, timedelta, timezone

import jwt

from psvault.config import Settings


def create_token(user_id: str, settings: Settings, email: str | None = None) -> dict:
    """
    Cria JWT para um usuário.
    Retorna dict com access_token e expires_in_minutes.
    """
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    payload = {"sub": user_id, "iat": now, "exp": expires_at}
    if email:
        payload["email"] = email

    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in_minutes": settings.JWT_EXPIRE_MINUTES,
    }


def verify_token(token: str, settings: Settings) -> dict:
    """
    Valida JWT e retorna payload.
    Lança jwt.ExpiredSignatureError ou jwt.InvalidTokenError se inválido.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
