# ui/streamlit_app.py
import os
import requests
import streamlit as st

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")

SENTIMENT_GLYPHS = {"positive": "👍", "negative": "👎", "neutral": "❓", "unknown": "❓"}
DENSITY_GLYPHS = {"high": "🟢", "medium": "🟡", "low": "🔴", "unknown": "⚪"}

st.set_page_config(page_title="Review Analyzer", page_icon="📝", layout="centered")

# --- Header / health ---
st.title("📝 Review Analyzer")
with st.sidebar:
    st.markdown("**Backend:** " + BACKEND_URL)
    try:
        r = requests.get(f"{BACKEND_URL}/healthz", timeout=5)
        if r.ok:
            st.success("API: healthy")
            count = requests.get(f"{BACKEND_URL}/v1/reviews", timeout=5).json()["count"]
            st.caption(f"Loaded {count} reviews")
        else:
            st.warning(f"API: {r.status_code}")
    except Exception as e:
        st.error(f"API not reachable: {e}")
    token = st.text_input("Hugging Face API token (optional)", type="password")


def analyze(path: str):
    try:
        resp = requests.post(f"{BACKEND_URL}{path}", json={"api_token": token.strip() or None}, timeout=90)
    except Exception as e:
        st.error(f"Request failed: {e}")
        return None
    if resp.status_code == 409:
        st.info(resp.json()["detail"])
        return None
    if not resp.ok:
        st.error(f"Error {resp.status_code}: {resp.text}")
        return None
    data = resp.json()
    if data["category"] != "ok":
        st.error(data["message"])
    return data


if st.button("Select Random Review", type="primary"):
    try:
        resp = requests.post(f"{BACKEND_URL}/v1/reviews/random", timeout=10)
        if resp.ok:
            st.session_state["review"] = resp.json()["text"]
            st.session_state.pop("sentiment", None)
            st.session_state.pop("nouns", None)
        else:
            st.error(resp.json().get("detail", resp.text))
    except Exception as e:
        st.error(f"Request failed: {e}")

st.text_area("Review", value=st.session_state.get("review", ""), height=160, disabled=True)

col_a, col_b = st.columns([1, 1])
with col_a:
    if st.button("Analyze Sentiment"):
        with st.spinner("Analyzing sentiment..."):
            result = analyze("/v1/sentiment")
        if result:
            st.session_state["sentiment"] = result
    result = st.session_state.get("sentiment")
    glyph = SENTIMENT_GLYPHS[result["verdict"]] if result else "❓"
    st.markdown(f"## {glyph}")
    if result and result.get("score") is not None:
        st.caption(f"{result['verdict'].capitalize()} ({result['score'] * 100:.1f}%)")
with col_b:
    if st.button("Count Nouns"):
        with st.spinner("Counting nouns..."):
            result = analyze("/v1/nouns")
        if result:
            st.session_state["nouns"] = result
    result = st.session_state.get("nouns")
    glyph = DENSITY_GLYPHS[result["verdict"]] if result else "⚪"
    st.markdown(f"## {glyph}")
    if result and result.get("heuristic"):
        st.caption(f"Offline estimate: {result['noun_count']} noun-like words")

st.markdown("---")
st.caption("Sentiment and noun density come from the Hugging Face Inference API. "
           "When the noun answer can't be read, an offline word-shape heuristic is used instead.")
