"""Network configuration constants for the exam client and reference server."""

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000
DEFAULT_API_BASE_URL: str = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"
REQUEST_TIMEOUT_SECONDS: float = 10.0
