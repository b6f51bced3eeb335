"""Service catalog operations: listing, creation, partial update and deletion with ownership rules."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from catalog.core.errors import Forbidden, InternalError, NotFound, ValidationError
from catalog.core.roles import Role
from catalog.models import Service, User
from catalog.schemas.service import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError(details=str(e)) from e


def _load(db: Session, service_id: int) -> Service | None:
    return (
        db.query(Service)
        .options(joinedload(Service.owner))
        .filter(Service.id == service_id)
        .first()
    )


def list_services(db: Session, viewer: User | None = None) -> list[Service]:
    """
    Return services newest first, each with its owner loaded.

    An admin only sees services they own; superadmins, clients and anonymous
    callers see the whole catalog.
    """
    query = db.query(Service).options(joinedload(Service.owner))
    if viewer is not None and viewer.role == Role.ADMIN:
        query = query.filter(Service.owner_id == viewer.id)
    try:
        return query.order_by(Service.created_at.desc(), Service.id.desc()).all()
    except SQLAlchemyError as e:
        raise InternalError(details=str(e)) from e


def get_service(db: Session, service_id: int) -> Service:
    service = _load(db, service_id)
    if service is None:
        raise NotFound("Service not found")
    return service


def authorize_service_change(actor: User, service: Service) -> None:
    """Superadmins may change any service; admins only their own; every other role is refused."""
    if actor.role == Role.SUPERADMIN:
        return
    if actor.role == Role.ADMIN and service.owner_id == actor.id:
        return
    raise Forbidden("You do not have permission to modify this service")


def create_service(db: Session, owner: User, body: ServiceCreate) -> Service:
    """Create a service owned by the caller. Name and price are required."""
    if not body.name or not body.name.strip() or body.price is None:
        raise ValidationError("Name and price are required")
    service = Service(
        name=body.name.strip(),
        description=body.description,
        price=float(body.price),
        owner_id=owner.id,
    )
    db.add(service)
    _commit(db)
    logger.info("Service created: id=%s owner_id=%s", service.id, owner.id)
    return get_service(db, service.id)


def update_service(db: Session, actor: User, service: Service, body: ServiceUpdate) -> Service:
    """Overwrite only the fields present in the request body."""
    authorize_service_change(actor, service)
    changes = body.model_dump(exclude_unset=True)
    if "name" in changes:
        name = changes["name"]
        if name is None or not name.strip():
            raise ValidationError("Name cannot be empty")
        service.name = name.strip()
    if "description" in changes:
        service.description = changes["description"]
    if "price" in changes:
        if changes["price"] is None:
            raise ValidationError("Price cannot be empty")
        service.price = float(changes["price"])
    _commit(db)
    logger.info("Service updated: id=%s by user_id=%s fields=%s", service.id, actor.id, sorted(changes))
    return get_service(db, service.id)


def delete_service(db: Session, actor: User, service: Service) -> None:
    authorize_service_change(actor, service)
    service_id = service.id
    db.delete(service)
    _commit(db)
    logger.info("Service deleted: id=%s by user_id=%s", service_id, actor.id)
