# app/modules/inventory/router.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.core.auth.schemas import IdentityContext, Rol
from .service import InventoryService
from .schemas import (
    EntradaInventarioRequest, EntradaInventarioResponse,
    MovimientosResponse, TipoMovimiento
)

router = APIRouter(prefix="/inventario", tags=["Inventario"])

# ==================== ENTRADAS ====================

@router.post("/entradas", response_model=EntradaInventarioResponse, status_code=status.HTTP_201_CREATED)
def registrar_entrada(
    entrada: EntradaInventarioRequest,
    identity: IdentityContext = Depends(require_roles([Rol.ADMINISTRADOR])),
    db: Session = Depends(get_db)
):
    """
    Registrar entrada de mercancía

    - Suma la cantidad al stock de cada producto
    - Deja un movimiento ENTRADA con referencia y motivo
    - Todo o nada: un producto inexistente revierte la entrada completa
    """
    service = InventoryService(db)
    return service.registrar_entrada(identity, entrada)

# ==================== HISTORIAL ====================

@router.get("/entradas", response_model=MovimientosResponse)
def listar_movimientos(
    tipo: TipoMovimiento = Query(TipoMovimiento.TODOS, description="ENTRADA, SALIDA o TODOS"),
    inicio: Optional[date] = Query(None, description="Fecha inicio (inclusive)"),
    fin: Optional[date] = Query(None, description="Fecha fin (inclusive)"),
    identity: IdentityContext = Depends(require_roles([Rol.ADMINISTRADOR])),
    db: Session = Depends(get_db)
):
    """Historial de movimientos de inventario de la empresa"""
    service = InventoryService(db)
    return service.listar_movimientos(identity, tipo, inicio, fin)
