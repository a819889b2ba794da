"""Seed demo departments, categories, and articles."""

import uuid

from django.core.management.base import BaseCommand

from access_control.models import Role
from access_control.permissions import Caller
from articles.models import Article
from articles.services import ArticlesService
from core.slugs import slug_service
from departments.models import Category, Department
from departments.services import DepartmentsService

SEED_AUTHOR_ID = uuid.UUID("00000000-0000-4000-8000-000000000001")

SEED_DEPARTMENTS = [
    {
        "name": "Facilities",
        "description": "Buildings, equipment, and maintenance procedures.",
        "categories": [
            {"name": "HVAC", "slug": "hvac", "description": "Heating, ventilation, and air conditioning."},
            {"name": "Elevators", "slug": "elevators", "description": "Elevator operation and upkeep."},
        ],
    },
    {
        "name": "Human Resources",
        "description": "Policies and guides for staff.",
        "categories": [
            {"name": "Onboarding", "slug": "onboarding", "description": "First weeks on the job."},
        ],
    },
]

SEED_ARTICLES = [
    {
        "category": ("facilities", "hvac"),
        "title": "Replacing an Air Filter",
        "summary": "Quarterly filter replacement for rooftop units.",
        "content": "Switch the unit off at the panel, open the access door, and swap the filter.",
        "is_pinned": True,
        "is_published": True,
        "tags": ["Air Filter", "Maintenance"],
    },
    {
        "category": ("facilities", "elevators"),
        "title": "Elevator Maintenance Checklist",
        "summary": "Monthly inspection steps.",
        "content": "Inspect door sensors, test the emergency phone, and log the cab levelling.",
        "is_published": True,
        "tags": ["Inspection", "Safety"],
    },
    {
        "category": ("human-resources", "onboarding"),
        "title": "Your First Week",
        "summary": "What to expect when you join.",
        "content": "Collect your badge at reception and book a session with your manager.",
        "is_published": True,
        "tags": ["Welcome"],
    },
    {
        "category": ("human-resources", "onboarding"),
        "title": "Draft: Remote Onboarding",
        "content": "Notes on shipping equipment to remote hires. Still being written.",
        "is_published": False,
        "tags": ["Remote"],
    },
    {
        "category": None,
        "title": "How to Use the Knowledge Base",
        "content": "Browse by department or search by keyword; tags are searchable too.",
        "is_pinned": True,
        "is_published": True,
        "tags": [],
    },
]


def seed_caller() -> Caller:
    """Admin caller that owns every seeded article."""
    return Caller(id=SEED_AUTHOR_ID, role=Role.ADMIN)


def create_seed_departments(service: DepartmentsService | None = None) -> dict[tuple[str, str], Category]:
    """Create seeded departments and categories if missing; return categories by (dept slug, slug)."""
    service = service or DepartmentsService()
    caller = seed_caller()
    categories = {}
    for department_seed in SEED_DEPARTMENTS:
        department = Department.objects.filter(slug=slug_service.generate(department_seed["name"])).first()
        if department is None:
            department = service.create_department(
                caller, {"name": department_seed["name"], "description": department_seed["description"]}
            )
        for entry in department_seed["categories"]:
            category = Category.objects.filter(department=department, slug=entry["slug"]).first()
            if category is None:
                category = service.create_category(caller, {**entry, "department_id": department.pk})
            categories[(department.slug, category.slug)] = category
    return categories


def create_seed_articles(
    categories: dict[tuple[str, str], Category],
    service: ArticlesService | None = None,
) -> list[Article]:
    """Create seeded articles that do not exist yet; return the ones created."""
    service = service or ArticlesService()
    caller = seed_caller()
    created = []
    for entry in SEED_ARTICLES:
        if Article.objects.filter(slug=slug_service.generate(entry["title"])).exists():
            continue
        payload = {key: value for key, value in entry.items() if key not in ("category", "tags")}
        location = entry["category"]
        payload["category_id"] = categories[location].pk if location else None
        payload["tags"] = [{"name": name} for name in entry["tags"]]
        created.append(service.create_article(caller, payload))
    return created


def reset_seed_data(service: DepartmentsService | None = None) -> None:
    """Delete seeded departments (cascading) and uncategorised seeded articles."""
    service = service or DepartmentsService()
    caller = seed_caller()
    slugs = [slug_service.generate(department_seed["name"]) for department_seed in SEED_DEPARTMENTS]
    for department in Department.objects.filter(slug__in=slugs):
        service.delete_department(caller, department.pk)
    Article.objects.filter(author_id=SEED_AUTHOR_ID, category__isnull=True).delete()


class Command(BaseCommand):
    """Management command to seed demo knowledge-base content."""

    help = (
        "Seed demo departments, categories, and articles with tags. "
        "Use --reset to clear previously seeded data first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Remove the seeded departments (with their categories and articles) before seeding.",
        )

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        if options.get("reset"):
            self.stdout.write("Resetting previously seeded knowledge-base data...")
            reset_seed_data()
            self.stdout.write(self.style.WARNING("Seeded data cleared."))

        self.stdout.write("Seeding knowledge base...")
        categories = create_seed_departments()
        articles = create_seed_articles(categories)
        self.stdout.write(
            self.style.SUCCESS(
                f"Knowledge base seed completed ({len(categories)} categories, {len(articles)} new articles)."
            )
        )
