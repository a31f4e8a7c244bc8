# tests/test_core_security.py
"""
Testes unitários da emissão e verificação de tokens JWT (`app.core.security`).

Cobrem o ciclo emitir -> verificar, a expiração com relógio controlado
(freezegun) e as falhas que devem resultar em `TokenInvalidError`.
"""

# ========================
# --- Importações ---
# ========================
import uuid
from datetime import datetime, timedelta, timezone
import pytest
from freezegun import freeze_time
from jose import jwt

# --- Módulos da Aplicação ---
from app.core.security import (ALGORITHM, TokenExpiredError, TokenInvalidError,
                               create_access_token, decode_token)

# ========================
# --- Constantes de Teste ---
# ========================
SECRET = "segredo-principal-dos-testes-de-token"
OTHER_SECRET = "outro-segredo-qualquer"
SUBJECT = uuid.UUID("8a4c1f7e-2b3d-4e5f-9a6b-7c8d9e0f1a2b")
FROZEN_START = "2026-03-10 12:00:00"

# ========================
# --- Testes para `create_access_token` ---
# ========================
def test_create_access_token_contains_only_sub_and_exp():
    """O payload carrega somente `sub` (string UUID) e `exp` (segundos Unix)."""
    with freeze_time(FROZEN_START):
        token = create_access_token(SUBJECT, expiry_hours=2, secret_key=SECRET)
        expected_exp = int((datetime.now(timezone.utc) + timedelta(hours=2)).timestamp())

    claims = jwt.get_unverified_claims(token)
    header = jwt.get_unverified_header(token)

    assert set(claims) == {"sub", "exp"}, f"Claims inesperados: {claims}"
    assert claims["sub"] == str(SUBJECT)
    assert claims["exp"] == expected_exp
    assert header["alg"] == ALGORITHM == "HS256"

# ========================
# --- Testes para `decode_token` ---
# ========================
def test_decode_token_round_trip_returns_subject():
    token = create_access_token(SUBJECT, expiry_hours=1, secret_key=SECRET)

    assert decode_token(token, SECRET) == SUBJECT

def test_token_valid_within_ttl_and_expired_after():
    """
    Um token de 1 hora é aceito durante a próxima hora e rejeitado com
    `TokenExpiredError` logo depois do instante de expiração.
    """
    with freeze_time(FROZEN_START) as frozen_time:
        token = create_access_token(SUBJECT, expiry_hours=1, secret_key=SECRET)

        # --- Dentro da validade ---
        frozen_time.tick(timedelta(minutes=59, seconds=59))
        assert decode_token(token, SECRET) == SUBJECT, "Token deveria ser aceito antes de expirar."

        # --- Após a expiração ---
        frozen_time.tick(timedelta(seconds=2))
        with pytest.raises(TokenExpiredError):
            decode_token(token, SECRET)

def test_decode_token_with_past_exp_raises_expired():
    expired_token = jwt.encode(
        {"sub": str(SUBJECT), "exp": int((datetime.now(timezone.utc) - timedelta(minutes=5)).timestamp())},
        SECRET,
        algorithm=ALGORITHM
    )

    with pytest.raises(TokenExpiredError):
        decode_token(expired_token, SECRET)

def test_decode_token_with_different_secret_raises_invalid():
    token = create_access_token(SUBJECT, expiry_hours=1, secret_key=SECRET)

    with pytest.raises(TokenInvalidError):
        decode_token(token, OTHER_SECRET)

def test_decode_token_expired_and_wrongly_signed_is_invalid_not_expired():
    """A assinatura é verificada antes da expiração."""
    with freeze_time(FROZEN_START) as frozen_time:
        token = create_access_token(SUBJECT, expiry_hours=1, secret_key=SECRET)
        frozen_time.tick(timedelta(hours=3))

        with pytest.raises(TokenInvalidError):
            decode_token(token, OTHER_SECRET)

def test_decode_token_with_other_algorithm_raises_invalid():
    exp = int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())
    hs512_token = jwt.encode({"sub": str(SUBJECT), "exp": exp}, SECRET, algorithm="HS512")

    with pytest.raises(TokenInvalidError):
        decode_token(hs512_token, SECRET)

@pytest.mark.parametrize(
    "malformed_token",
    ["", "nao-e-um-jwt", "a.b.c", "eyJhbGciOiJIUzI1NiJ9.e30"],
)
def test_decode_token_with_malformed_token_raises_invalid(malformed_token: str):
    with pytest.raises(TokenInvalidError):
        decode_token(malformed_token, SECRET)

def test_decode_token_without_sub_raises_invalid():
    exp = int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())
    token_no_sub = jwt.encode({"exp": exp}, SECRET, algorithm=ALGORITHM)

    with pytest.raises(TokenInvalidError):
        decode_token(token_no_sub, SECRET)

def test_decode_token_without_exp_raises_invalid():
    token_no_exp = jwt.encode({"sub": str(SUBJECT)}, SECRET, algorithm=ALGORITHM)

    with pytest.raises(TokenInvalidError):
        decode_token(token_no_exp, SECRET)

def test_decode_token_with_non_uuid_sub_raises_invalid():
    exp = int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())
    token = jwt.encode({"sub": "admin", "exp": exp}, SECRET, algorithm=ALGORITHM)

    with pytest.raises(TokenInvalidError):
        decode_token(token, SECRET)
