# Import all models so that SQLAlchemy registers them for metadata.create_all
from cms.models.code_counter import CodeCounter
from cms.models.customer import Customer
from cms.models.employee import Employee, Role

__all__ = [
    "CodeCounter",
    "Customer",
    "Employee",
    "Role",
]
