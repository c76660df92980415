"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.lab_booking.app.service.equipment_ledger import EquipmentReservationLedger
from src.service.lab_booking.app.service.seat_identity_resolver import SeatIdentityResolver
from src.service.lab_booking.driven_adapter.notification.email_sender import build_email_sender
from src.service.lab_booking.driven_adapter.notification.notification_dispatcher_impl import (
    NotificationDispatcherImpl,
)
from src.service.lab_booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (event-loop-aware engine behind Database.session)
    database = providers.Singleton(Database)

    # Background task group (set by main.py lifespan)
    # Used for fire-and-forget e-mail dispatch after commit
    task_group = providers.Object(None)

    # One unit of work (and so one transaction) per use case instance
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session
    )

    # Stateless domain services
    seat_identity_resolver = providers.Singleton(SeatIdentityResolver)
    equipment_ledger = providers.Singleton(EquipmentReservationLedger)

    # Outbound e-mail
    email_sender = providers.Singleton(build_email_sender)
    notification_dispatcher = providers.Singleton(
        NotificationDispatcherImpl,
        email_sender=email_sender,
        task_group_provider=task_group.provider,
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()
