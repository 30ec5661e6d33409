#!/usr/bin/env python3
"""
File name, path and seed-data constants for the HomeHub installer.

All modules import from here instead of hardcoding strings.

Naming Convention:
- config.yml.j2 = packaged template (rendered once per run)
- config.yml = rendered runtime config consumed by the container
- config.yml.backup = single-slot copy of the previous config.yml
"""

# ============================================================================
# Working-directory artifacts
# ============================================================================

CONFIG_TEMPLATE = 'config.yml.j2'
CONFIG_FILE = 'config.yml'
CONFIG_BACKUP_SUFFIX = '.backup'
ENV_FILE = '.env'
SECRET_KEY_NAME = 'SECRET_KEY'
SECRET_KEY_BYTES = 32

COMPOSE_FILE = 'compose.yml'
PACKAGE_JSON = 'package.json'

# Optional per-directory overrides for InstallerSettings
SETTINGS_OVERRIDES = 'homehub-install.toml'
SETTINGS_SECTION = 'install'

DATA_DIRS = ('uploads', 'media', 'pdfs', 'data')

# ============================================================================
# Host environment
# ============================================================================

SUPPORTED_PLATFORMS = ('darwin',)
SERVICE_PORT = 5002
STARTUP_WAIT_SECONDS = 3
COMMAND_TIMEOUT_SECONDS = 10

# Probed in order when docker is not on PATH
DOCKER_FALLBACK_PATHS = (
    '/usr/local/bin/docker',
    '/Applications/Docker.app/Contents/Resources/bin/docker',
)
# Fallbacks whose directory must be added to PATH for the rest of the run
DOCKER_PATH_EXPORT_LOCATIONS = (
    '/Applications/Docker.app/Contents/Resources/bin/docker',
)
# Relative to the user's home directory
DOCKER_DESKTOP_SOCKET = '.docker/run/docker.sock'

DOCKER_DESKTOP_URL = 'https://www.docker.com/products/docker-desktop'
NODEJS_URL = 'https://nodejs.org/'

NPM_BUILD_SCRIPT = 'build:css'

LOG_LEVEL_ENV = 'HOMEHUB_INSTALL_LOG_LEVEL'
DEFAULT_LOG_LEVEL = 'INFO'

# ============================================================================
# Seed data rendered into config.yml
# ============================================================================

DEFAULT_HUB_CONFIG = {
    'instance_name': "Tom and Eleanor's Hub",
    'password': '3056',
    'admin_name': 'Administrator',
    'feature_toggles': {
        'shopping_list': True,
        'media_downloader': True,
        'pdf_compressor': True,
        'qr_generator': True,
        'notes': True,
        'shared_cloud': True,
        'who_is_home': True,
        'chores': True,
        'recipes': True,
        'expiry_tracker': True,
        'url_shortener': True,
        'expense_tracker': True,
    },
    'family_members': ['Tom', 'Eleanor'],
    'reminders': {
        'time_format': '12h',
        'categories': [
            {'key': 'health', 'label': 'Health', 'color': '#dc2626'},
            {'key': 'bills', 'label': 'Bills', 'color': '#0d9488'},
            {'key': 'school', 'label': 'School', 'color': '#7c3aed'},
            {'key': 'family', 'label': 'Family', 'color': '#2563eb'},
        ],
    },
    'theme': {
        'primary_color': '#1d4ed8',
        'secondary_color': '#a0aec0',
        'background_color': '#f7fafc',
        'card_background_color': '#fff',
        'text_color': '#333',
        'sidebar_background_color': '#2563eb',
        'sidebar_text_color': '#ffffff',
        'sidebar_link_color': 'rgba(255,255,255,0.95)',
        'sidebar_link_border_color': 'rgba(255,255,255,0.18)',
        'sidebar_active_color': '#3b82f6',
    },
}

USEFUL_COMMANDS = (
    ('View logs', 'docker compose logs -f'),
    ('Stop HomeHub', 'docker compose stop'),
    ('Start HomeHub', 'docker compose start'),
    ('Restart HomeHub', 'docker compose restart'),
    ('Remove HomeHub', 'docker compose down'),
)
