from enum import Enum
import sqlalchemy as sa
from sqlalchemy import Column


class ReportCategory(str, Enum):
    MAINTENANCE = 'Mantenimiento'
    SECURITY = 'Seguridad'
    CLEANING = 'Limpieza'
    COMMON_AREAS = 'Áreas Comunes'
    ADMINISTRATION = 'Administración'
    NEIGHBOR_COMPLAINTS = 'Quejas de Vecinos'
    OTHER = 'Otro'


class ReportUrgency(str, Enum):
    LOW = 'Bajo'
    MEDIUM = 'Medio'
    HIGH = 'Alto'


class ReportStatus(str, Enum):
    PENDING = 'Pendiente'
    IN_PROGRESS = 'En proceso'
    RESOLVED = 'Resuelto'


def enum_column(enum_cls: type[Enum], name: str) -> Column:
    return Column(
        sa.Enum(
            enum_cls,
            values_callable=lambda enum: [item.value for item in enum],
            name=name,
        ),
        nullable=False,
    )
