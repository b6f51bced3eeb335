"""
Load sample services into the catalog. Run from project root:

  python -m catalog.scripts.seed_services          # insert samples (skips if services exist)
  python -m catalog.scripts.seed_services --force  # insert even if services exist
  python -m catalog.scripts.seed_services --clean  # delete every service

Samples are assigned round-robin to active admin and superadmin users, so create
one first (python -m catalog.scripts.create_user).
"""

import argparse
import logging
import sys

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog.core.config import get_settings
from catalog.core.database import create_db_engine, create_session_factory
from catalog.core.roles import SERVICE_MANAGER_ROLES
from catalog.models import Service, User

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

SAMPLE_SERVICES: list[dict] = [
    {
        "name": "Frontend Web Development",
        "description": "Modern, responsive user interfaces with React, Vue.js or Angular, including UX/UI design and mobile optimization.",
        "price": 1200.00,
    },
    {
        "name": "Backend Web Development",
        "description": "REST APIs and backend services with authentication, security and documentation.",
        "price": 1500.00,
    },
    {
        "name": "Fullstack Development",
        "description": "Complete web applications from frontend to backend, including database, APIs and deployment.",
        "price": 2500.00,
    },
    {
        "name": "Mobile App Development",
        "description": "Native iOS and Android apps, or hybrid apps with React Native or Flutter.",
        "price": 2000.00,
    },
    {
        "name": "DevOps Consulting",
        "description": "CI/CD pipelines, Docker containers, Kubernetes orchestration and deployment automation.",
        "price": 800.00,
    },
    {
        "name": "Database Optimization",
        "description": "SQL query analysis and tuning, indexing, partitioning and performance improvements.",
        "price": 600.00,
    },
    {
        "name": "E-commerce Development",
        "description": "Online stores with shopping cart, payment gateways, inventory management and admin panel.",
        "price": 3000.00,
    },
    {
        "name": "Cloud Migration",
        "description": "Migration of applications and data to AWS, Azure or Google Cloud, including architecture and optimization.",
        "price": 1800.00,
    },
    {
        "name": "GraphQL API Development",
        "description": "Scalable GraphQL APIs, including real-time subscriptions and query optimization.",
        "price": 1000.00,
    },
    {
        "name": "Web Security Audit",
        "description": "Security assessment of web applications, vulnerability identification and remediation advice.",
        "price": 900.00,
    },
    {
        "name": "Microservices Development",
        "description": "Architecture and development of microservice systems, including inter-service communication and data management.",
        "price": 2200.00,
    },
    {
        "name": "Systems Integration",
        "description": "Integration of business systems through APIs, webhooks and middleware with real-time data sync.",
        "price": 1400.00,
    },
    {
        "name": "Dashboard Development",
        "description": "Interactive dashboards and real-time reports with advanced data visualizations.",
        "price": 750.00,
    },
    {
        "name": "Process Automation",
        "description": "Scripts and tools that automate business processes, reducing turnaround time and manual errors.",
        "price": 650.00,
    },
    {
        "name": "Chatbot Development",
        "description": "Customer-service chatbots integrated with AI and natural language processing.",
        "price": 1100.00,
    },
]


def seed_services(db: Session, force: bool = False) -> int:
    """
    Insert SAMPLE_SERVICES, owners assigned round-robin over active admins/superadmins.

    Returns the number of services created; 0 when services already exist (and not
    force) or when there is no eligible owner.
    """
    existing = db.query(Service).count()
    if existing and not force:
        logger.warning("%s services already exist; use --force to add the samples anyway.", existing)
        return 0

    owners = (
        db.query(User)
        .filter(User.active.is_(True), User.role.in_(list(SERVICE_MANAGER_ROLES)))
        .order_by(User.id)
        .all()
    )
    if not owners:
        logger.error("No active admin or superadmin users found; create one first.")
        return 0

    for i, data in enumerate(SAMPLE_SERVICES):
        owner = owners[i % len(owners)]
        db.add(Service(owner_id=owner.id, **data))
        logger.info("Seeded: %s - %.2f (%s)", data["name"], data["price"], owner.name)
    db.commit()
    return len(SAMPLE_SERVICES)


def clean_services(db: Session) -> int:
    """Delete every service. Returns the number deleted."""
    deleted = db.query(Service).delete(synchronize_session=False)
    db.commit()
    return deleted


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the service catalog with sample data.")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--clean", action="store_true", help="Delete all services")
    group.add_argument("--force", action="store_true", help="Seed even if services already exist")
    args = parser.parse_args(argv)

    load_dotenv()
    settings = get_settings()
    SessionLocal = create_session_factory(create_db_engine(settings))
    db = SessionLocal()
    try:
        if args.clean:
            deleted = clean_services(db)
            logger.info("Deleted %s services.", deleted)
        else:
            created = seed_services(db, force=args.force)
            logger.info("Seed completed: services_created=%s", created)
        return 0
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
