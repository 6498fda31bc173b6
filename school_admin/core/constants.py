"""
Constantes centralizadas para el sistema.
Elimina "magic strings" y provee tipado fuerte para valores comunes.
"""

from enum import Enum, unique


@unique
class PaymentStatus(str, Enum):
    """Estados de un pago."""

    PAGADO = "Pagado"
    PENDIENTE = "Pendiente"
    CANCELADO = "Cancelado"


@unique
class PaymentMethod(str, Enum):
    """Métodos de pago conocidos. El subconjunto aceptado se configura en PAYMENT_METHODS."""

    EFECTIVO = "Efectivo"
    TARJETA = "Tarjeta"
    TRANSFERENCIA = "Transferencia"


@unique
class StudentStatus(str, Enum):
    """Estados de un alumno."""

    ACTIVO = "Activo"
    INACTIVO = "Inactivo"
    SUSPENDIDO = "Suspendido"


@unique
class AttendanceStatus(str, Enum):
    """Estados de un registro de asistencia."""

    PRESENTE = "Presente"
    AUSENTE = "Ausente"
    RETARDO = "Retardo"


@unique
class InventoryStatus(str, Enum):
    """Estados de un item de inventario, derivados de la cantidad."""

    DISPONIBLE = "Disponible"
    BAJO_STOCK = "Bajo stock"
    AGOTADO = "Agotado"


@unique
class ReceiptCounterReset(str, Enum):
    """Política de reinicio del contador de recibos."""

    NEVER = "never"
    MONTHLY = "monthly"


# Filtro de categoría que significa "sin filtro" en el listado de inventario
ALL_CATEGORIES = "all"

# Formato de fechas de calendario (YYYY-MM-DD)
DATE_FORMAT = "%Y-%m-%d"
