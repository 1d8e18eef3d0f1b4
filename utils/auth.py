# utils/auth.py
# ---------------------------
# Verificacion de tokens Bearer (JWT firmado con secreto compartido).
# El verificador se construye al crear la app y se guarda en app.state;
# los endpoints lo reciben por dependencia, nunca de una variable global.
# ---------------------------

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from utils.errores import TokenInvalido, TokenRequerido

logger = logging.getLogger(__name__)

# auto_error=False para responder con la envoltura propia (401) y no con el default de FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


class VerificadorToken:
    """
    Emite y verifica tokens JWT con un secreto compartido.

    Un secreto vacio hace que toda verificacion falle.
    """

    def __init__(self, secreto: str, algoritmo: str = "HS256"):
        self.secreto = secreto
        self.algoritmo = algoritmo

    def verificar(self, token: str) -> dict:
        """
        Valida firma y expiracion y devuelve el payload.

        Excepciones:
        - TokenInvalido si el secreto no esta configurado, la firma no
          coincide, el token esta mal formado o ya expiro.
        """
        if not self.secreto:
            logger.warning("JWT_SECRET no configurado; se rechaza el token")
            raise TokenInvalido()
        try:
            return jwt.decode(token, self.secreto, algorithms=[self.algoritmo])
        except jwt.ExpiredSignatureError:
            logger.warning("Token expirado")
            raise TokenInvalido()
        except jwt.InvalidTokenError as e:
            logger.warning("Token invalido: %s", e)
            raise TokenInvalido()

    def emitir(self, payload: dict, horas: int = 4) -> str:
        """Firma payload agregando exp a horas desde ahora."""
        if not self.secreto:
            raise ValueError("Se requiere JWT_SECRET para emitir tokens")
        claims = dict(payload)
        claims["exp"] = datetime.now(timezone.utc) + timedelta(hours=horas)
        return jwt.encode(claims, self.secreto, algorithm=self.algoritmo)


def get_verificador(request: Request) -> VerificadorToken:
    return request.app.state.verificador


async def autenticar(
    credenciales: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verificador: VerificadorToken = Depends(get_verificador),
) -> dict:
    """
    Dependencia de los endpoints protegidos.
    Sin token -> 401; token invalido o expirado -> 403.
    Retorna el payload del principal autenticado.
    """
    if credenciales is None or not credenciales.credentials:
        raise TokenRequerido()
    return verificador.verificar(credenciales.credentials)
