"""
Centralized configuration: all env vars and constants.
"""
import os


# ── Flask ────────────────────────────────────────────────────────────────────
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')

# ── Redis (change feed + MFA challenges) ─────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

# ── PostgreSQL ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# ── Object storage (S3-compatible) ───────────────────────────────────────────
STORAGE_ENDPOINT_URL = os.getenv('STORAGE_ENDPOINT_URL')
STORAGE_ACCESS_KEY_ID = os.getenv('STORAGE_ACCESS_KEY_ID')
STORAGE_SECRET_ACCESS_KEY = os.getenv('STORAGE_SECRET_ACCESS_KEY')
STORAGE_REGION = os.getenv('STORAGE_REGION', 'auto')
STORAGE_PUBLIC_URL = os.getenv('STORAGE_PUBLIC_URL', '')
VIDEOS_BUCKET = os.getenv('VIDEOS_BUCKET', 'videos')
VIDEO_MAX_BYTES = int(os.getenv('VIDEO_MAX_BYTES', str(1024 * 1024 * 100)))

# ── Auth (provider-issued JWTs) ──────────────────────────────────────────────
JWT_SECRET = os.getenv('JWT_SECRET')
JWT_ALGORITHM = 'HS256'
JWT_AUDIENCE = os.getenv('JWT_AUDIENCE', 'authenticated')
ACCESS_TOKEN_TTL = int(os.getenv('ACCESS_TOKEN_TTL', '3600'))
LOCAL_USER_ID = '00000000-0000-0000-0000-000000000000'

# ── MFA ──────────────────────────────────────────────────────────────────────
MFA_ISSUER = os.getenv('MFA_ISSUER', 'LeadDesk')
MFA_CHALLENGE_TTL = 300

# ── Leads ────────────────────────────────────────────────────────────────────
DEFAULT_PROFILE_IMAGE = 'https://abs.twimg.com/sticky/default_profile_images/default_profile.png'
LEADS_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# ── Activity logs ────────────────────────────────────────────────────────────
ACTIVITY_PAGE_SIZE = 20

# ── Test data generator ──────────────────────────────────────────────────────
GENERATE_TOTAL_LEADS = 10
GENERATE_BATCH_SIZE = 100

# ── Realtime ─────────────────────────────────────────────────────────────────
REALTIME_KEEPALIVE_SECONDS = 15
REALTIME_DEDUP_SECONDS = 5.0

# ── Roles ────────────────────────────────────────────────────────────────────
ROLES = ['admin', 'user']
DEFAULT_ROLE = 'user'

