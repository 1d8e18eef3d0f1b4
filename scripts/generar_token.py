#!/usr/bin/env python3
"""
Script para generar un token JWT de prueba contra el API.

Uso:
    python -m scripts.generar_token [--id ID] [--email EMAIL] [--horas N]

Variables de entorno requeridas:
    JWT_SECRET (y opcionalmente JWT_ALGORITHM, por defecto HS256)

Ejemplo:
    export JWT_SECRET=cambia-esto
    python -m scripts.generar_token --email admin@example.com
"""

import argparse
import os
import sys

from utils.auth import VerificadorToken


def generar_token(id_usuario: str, email: str, horas: int = 4) -> str:
    verificador = VerificadorToken(
        os.getenv("JWT_SECRET", ""),
        os.getenv("JWT_ALGORITHM", "HS256"),
    )
    return verificador.emitir({"id": id_usuario, "email": email}, horas=horas)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Genera un token JWT de prueba")
    parser.add_argument("--id", default="test-user-id", help="Identificador del usuario")
    parser.add_argument("--email", default="test@example.com", help="Email del usuario")
    parser.add_argument("--horas", type=int, default=4, help="Vigencia en horas")
    args = parser.parse_args(argv)

    try:
        token = generar_token(args.id, args.email, args.horas)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(f"Generated JWT Token: {token}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
