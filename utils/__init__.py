from .env import load_project_dotenv
from .logger import get_logger

__all__ = ["get_logger", "load_project_dotenv"]

# RENTAL_* settings may live in the project .env; load it before config is read.
load_project_dotenv()
