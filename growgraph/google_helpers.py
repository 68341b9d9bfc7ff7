import logging
import os
from google.cloud import firestore, secretmanager
from google.oauth2 import service_account
from google.auth import default as google_auth_default

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

logger = logging.getLogger("growgraph")

# --- Configuration ---
PORT                = int(os.getenv("PORT", "5002"))
PORT_ATTEMPTS       = int(os.getenv("PORT_ATTEMPTS", "10"))

OPENAI_API_KEY      = os.getenv("OPENAI_API_KEY")
OPENAI_SECRET_ID    = os.getenv("OPENAI_SECRET_ID")
OPENAI_MODEL        = os.getenv("OPENAI_MODEL", "gpt-4o")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
LLM_MAX_RETRIES     = int(os.getenv("LLM_MAX_RETRIES", "8"))
LLM_INITIAL_DELAY   = float(os.getenv("LLM_INITIAL_DELAY_SECONDS", "5.0"))

PROJECT_ID          = os.getenv("FIREBASE_PROJECT_ID") or os.getenv("GOOGLE_CLOUD_PROJECT")
FIRESTORE_DATABASE  = os.getenv("FIRESTORE_DATABASE", "(default)")
MINDMAP_COLLECTION  = os.getenv("MINDMAP_COLLECTION", "mindmaps")


def _build_creds():
    key_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
    scopes = ["https://www.googleapis.com/auth/cloud-platform"]
    if key_path and os.path.exists(key_path):
        return service_account.Credentials.from_service_account_file(key_path, scopes=scopes)
    creds, _ = google_auth_default(scopes=scopes)
    return creds


def validate_environment() -> None:
    if not OPENAI_API_KEY and not OPENAI_SECRET_ID:
        raise RuntimeError("OpenAI API Key is missing in environment variables (OPENAI_API_KEY or OPENAI_SECRET_ID)")
    if not PROJECT_ID:
        raise RuntimeError("Required Firebase configuration is missing in environment variables (FIREBASE_PROJECT_ID)")


def get_openai_api_key() -> str:
    global OPENAI_API_KEY

    if OPENAI_API_KEY:
        return OPENAI_API_KEY

    if OPENAI_SECRET_ID:
        creds = _build_creds()
        client = secretmanager.SecretManagerServiceClient(credentials=creds)
        name = client.secret_version_path(PROJECT_ID, OPENAI_SECRET_ID, "latest")
        resp = client.access_secret_version(request={"name": name})
        OPENAI_API_KEY = resp.payload.data.decode("utf-8").strip()
        return OPENAI_API_KEY

    raise RuntimeError("No OPENAI_API_KEY and no Secret Manager configured")


def get_firestore_client() -> firestore.Client:
    creds = _build_creds()
    logger.info(f"[DB] Connecting to Firestore project={PROJECT_ID} database={FIRESTORE_DATABASE}")
    return firestore.Client(project=PROJECT_ID, credentials=creds, database=FIRESTORE_DATABASE)
