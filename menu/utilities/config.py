"""Configuration management for the menu generator."""
import os
from typing import Final, Optional
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Recipe lookup service
RECIPES_SOURCE: Final[str] = os.getenv('RECIPES_SOURCE', 'json').lower()  # http | json
RECIPE_API_URL: Final[str] = os.getenv('RECIPE_API_URL', 'http://localhost:5000')
RECIPE_API_TIMEOUT: Final[float] = float(os.getenv('RECIPE_API_TIMEOUT', '10'))
_seed = os.getenv('RANDOM_SEED', '')
RANDOM_SEED: Final[Optional[int]] = int(_seed) if _seed.strip().lstrip('-').isdigit() else None

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('MENU_DATA_DIR', str(BASE_DIR / 'data')))
PLAN_FILE: Final[Path] = Path(os.getenv('PLAN_FILE', str(DATA_DIR / 'plan.json')))
RECIPES_FILE: Final[Path] = Path(os.getenv('RECIPES_FILE', str(DATA_DIR / 'recipes.json')))
