from review_analyzer.settings import settings
def mask(s):
    return (s[:4] + "..." + s[-4:]) if s else None
print("API token :", mask(settings.HF_API_TOKEN))
print("API base  :", settings.HF_API_BASE)
print("Sentiment :", ", ".join(settings.SENTIMENT_MODELS))
print("Nouns     :", ", ".join(settings.NOUN_MODELS))
print("Reviews   :", settings.REVIEWS_URL or settings.REVIEWS_PATH)
