# app/modules/sales/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.core.auth.schemas import IdentityContext, Rol
from .service import SalesService
from .schemas import VentaCreateRequest, VentaCreadaResponse

router = APIRouter(prefix="/ventas", tags=["Ventas"])

# ==================== REGISTRO DE VENTAS ====================

@router.post("", response_model=VentaCreadaResponse, status_code=status.HTTP_201_CREATED)
def registrar_venta(
    venta_data: VentaCreateRequest,
    identity: IdentityContext = Depends(require_roles([Rol.ADMINISTRADOR, Rol.SUPER_ADMIN])),
    db: Session = Depends(get_db)
):
    """
    Registrar venta completa con múltiples métodos de pago

    Incluye:
    - Folio consecutivo por empresa
    - Validación de stock y precio de cada producto
    - Conciliación de pagos y cálculo de cambio
    - Descuento automático de inventario

    Todo ocurre en una sola transacción: si algo falla no queda rastro
    de la venta ni se consume el folio.
    """
    service = SalesService(db)
    return service.registrar_venta(identity, venta_data)
