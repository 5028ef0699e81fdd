# review_analyzer/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from dotenv import load_dotenv

# Ensure .env is loaded if present
load_dotenv()

class Settings(BaseSettings):
    # Hugging Face Inference API; the token is optional but raises rate limits
    HF_API_TOKEN: Optional[str] = None
    HF_API_BASE: str = "https://api-inference.huggingface.co/models"

    # First model is the primary endpoint, the rest are tried in order on 402/429
    SENTIMENT_MODELS: List[str] = [
        "siebert/sentiment-roberta-large-english",
        "distilbert/distilbert-base-uncased-finetuned-sst-2-english",
    ]
    SENTIMENT_PROMPT: str = "{text}"
    NOUN_MODELS: List[str] = [
        "mistralai/Mistral-7B-Instruct-v0.3",
        "HuggingFaceH4/zephyr-7b-beta",
    ]
    NOUN_PROMPT: str = (
        "Count the nouns in this review and return only High (>15), "
        "Medium (6-15), or Low (<6). {text}"
    )

    # Request policy
    REQUEST_TIMEOUT: float = 30.0
    RATE_LIMIT_BACKOFF: float = 0.0  # seconds; 0 disables sleeping between endpoints
    MAX_BACKOFF: float = 10.0

    # Interpretation
    SENTIMENT_MIN_SCORE: float = 0.5
    STRICT_NOUN_HEURISTIC: bool = True

    # Corpus: REVIEWS_URL wins over REVIEWS_PATH when set
    REVIEWS_PATH: str = "data/reviews_test.tsv"
    REVIEWS_URL: str | None = None

    # Server options
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def endpoints_for(self, models: List[str]) -> List[str]:
        base = self.HF_API_BASE.rstrip("/")
        return [f"{base}/{model.strip('/')}" for model in models]

settings = Settings()
