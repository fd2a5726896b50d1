# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, get_db, get_db_service
from .enums import REQUIRED_DATA, ApplicationStatus, DataRequirement
from .models import Application, FulfilledRequirement

__all__ = [
    "Base",
    "DatabaseService",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "ApplicationStatus",
    "DataRequirement",
    "REQUIRED_DATA",
    # Models
    "Application",
    "FulfilledRequirement",
]
