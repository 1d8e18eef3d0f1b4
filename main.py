# main.py
# -----------------------------------------------
# Aplicación FastAPI principal del back office ERP/CRM
# -----------------------------------------------

import os
from typing import Optional

from fastapi import FastAPI                              # Importa la clase principal de FastAPI

from db import lifespan
from utils.auth import VerificadorToken
from utils.errores import registrar_manejadores
from utils.logs import setup_logging

# Importa routers definidos en sus respectivos módulos
from cliente           import router as cliente_router        # cliente.py
from maquilador        import router as maquilador_router     # maquilador.py
from usuario           import router as usuario_router        # usuario.py


def create_app(verificador: Optional[VerificadorToken] = None) -> FastAPI:
    """
    Construye la aplicación. El verificador de tokens se inyecta
    (pruebas, scripts) o se arma con JWT_SECRET / JWT_ALGORITHM.
    """
    setup_logging()

    app = FastAPI(
        title=os.getenv("APP_TITLE", "ERP/CRM API"),   # Nombre en la documentación Swagger
        version=os.getenv("APP_VERSION", "1.0.0"),
        lifespan=lifespan,
    )

    app.state.verificador = verificador or VerificadorToken(
        os.getenv("JWT_SECRET", ""),
        os.getenv("JWT_ALGORITHM", "HS256"),
    )

    registrar_manejadores(app)

    # -------------------------------------------
    # Inclusión de routers (módulos de endpoints)
    # -------------------------------------------
    app.include_router(
        cliente_router,
        prefix="/clientes",
        tags=["Clientes"]
    )

    app.include_router(
        maquilador_router,
        prefix="/maquiladores",
        tags=["Maquiladores"]
    )

    app.include_router(
        usuario_router,
        prefix="/usuarios",
        tags=["Usuarios"]
    )

    # ---------------------------
    # Endpoint raíz
    # ---------------------------
    @app.get("/")
    async def root():
        """Retorna un mensaje simple para verificar que el servicio esté en línea"""
        return {"Estatus": "Online"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "3000")),
    )
