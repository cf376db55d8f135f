"""
Summarizer and question analyzer for video content.

Behavior:
- provider 'gemini': sends a prompt to the Gemini API, trying each
  configured model in order until one answers.
- provider 'local': summarizes with a local Hugging Face summarization
  pipeline and lays the result out as Markdown (overview, key points,
  conclusion).
- When no provider is usable, or every attempt fails, summaries fall back
  to generate_basic_summary() so callers always get Markdown back.
"""

import os
import re
import logging
from typing import List, Dict, Any, Optional

from google import genai

from prompts import build_summary_prompt, build_analysis_prompt, resolve_output_settings

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API key is missing. Please provide a valid Gemini API key."
ALL_MODELS_FAILED_MESSAGE = "Failed to analyze videos. All AI models encountered errors."


def generate_basic_summary(text: str, title: str) -> str:
    """
    Rule-based summary built from the title and description lines of the
    summarizer input. Used when no generative service is available.
    """
    title_match = re.search(r"Title: (.*?)(?:\n|\Z)", text)
    description_match = re.search(r"Description: ([\s\S]*?)(?:\n\n|\(This is a simulated|\Z)", text)

    extracted_title = title_match.group(1) if title_match else title
    description = description_match.group(1).strip() if description_match else ""

    summary = f"### {extracted_title}\n\n"

    if "how" in extracted_title.lower():
        topic = "a tutorial or guide"
    else:
        topic = "a topic related to " + " ".join(extracted_title.split(" ")[:3])
    summary += f"This video appears to be about {topic}.\n\n"

    summary += "#### Key points:\n\n"

    sentences = [s for s in re.split(r"[.!?]", description) if len(s.strip()) > 10][:5] if description else []
    if sentences:
        for sentence in sentences:
            summary += f"* {sentence.strip()}\n"
    elif description:
        summary += "* Limited information available from the video description\n"
        summary += "* Consider watching the full video for more details\n"
    else:
        summary += "* Limited information available from the video\n"
        summary += "* Consider watching the full video for more details\n"

    summary += "\n#### Summary:\n\n"
    summary += ("This is a basic summary generated without AI assistance. For a more detailed summary, "
                "please try again when the AI service is available.")
    return summary


class VideoSummarizer:
    def __init__(self, cfg: Dict[str, Any], client=None):
        """
        :param cfg: configuration dict; expected keys:
            - provider (str) 'gemini' or 'local'
            - api_key_env (str) environment variable holding the Gemini key
            - models (list) Gemini model names, tried in order
            - local_model (str) e.g. "facebook/bart-large-cnn"
            - max_input_chars, min_length, max_length (ints)
        :param client: optional pre-built genai.Client
        """
        self.cfg = cfg or {}
        self.provider = self.cfg.get("provider", "gemini")
        self.models: List[str] = list(self.cfg.get("models") or ["gemini-2.0-flash-lite"])
        self.local_model_name = self.cfg.get("local_model", "facebook/bart-large-cnn")
        self.max_input_chars = int(self.cfg.get("max_input_chars", 3000))
        self.min_length = int(self.cfg.get("min_length", 30))
        self.max_length = int(self.cfg.get("max_length", 200))

        self.client = client
        self.local_pipeline = None

        if self.provider == "gemini" and self.client is None:
            api_key = self.cfg.get("api_key") or os.environ.get(self.cfg.get("api_key_env", "GEMINI_API_KEY"))
            if api_key:
                try:
                    self.client = genai.Client(api_key=api_key)
                except Exception as e:
                    logger.error(f"Error initializing Gemini client: {e}")
            else:
                logger.warning("Gemini API key is missing. Using fallback summarizer.")
        elif self.provider == "local":
            self._load_local_pipeline()

        logger.info(f"VideoSummarizer initialized with provider: {self.provider}")

    def _load_local_pipeline(self):
        """Load the local summarization pipeline; leaves it unset on failure."""
        try:
            from transformers import pipeline
            import torch

            device = 0 if torch.cuda.is_available() else -1
            logger.info(f"Loading summarization model {self.local_model_name} (device={device})")
            self.local_pipeline = pipeline("summarization", model=self.local_model_name, device=device)
        except Exception as e:
            logger.warning(
                f"Could not load summarization model '{self.local_model_name}': {e}. "
                "Falling back to basic summaries."
            )
            self.local_pipeline = None

    def _generate(self, prompt: str) -> str:
        """
        Run the prompt through each configured model until one succeeds.
        Raises RuntimeError if all models fail.
        """
        last_error = None
        for model_name in self.models:
            try:
                logger.info(f"Attempting to use Gemini model: {model_name}")
                response = self.client.models.generate_content(model=model_name, contents=prompt)
                if response.text:
                    return response.text
                last_error = RuntimeError(f"Empty response from {model_name}")
            except Exception as e:
                logger.error(f"Error with model {model_name}: {e}")
                last_error = e
        raise RuntimeError(f"All Gemini models failed: {last_error}")

    def _summarize_local_text(self, text: str) -> str:
        out = self.local_pipeline(
            text,
            max_length=self.max_length,
            min_length=self.min_length,
            truncation=True,
        )
        if isinstance(out, list) and len(out) > 0 and "summary_text" in out[0]:
            return out[0]["summary_text"].strip()
        raise RuntimeError("Unexpected summarizer output")

    def _summarize_local(self, text: str, title: str) -> str:
        """
        Summarize long input piecewise, then lay out the result as Markdown.
        """
        if len(text) <= self.max_input_chars:
            summary = self._summarize_local_text(text)
        else:
            pieces = [text[i:i + self.max_input_chars] for i in range(0, len(text), self.max_input_chars)]
            partial = "\n\n".join(self._summarize_local_text(p) for p in pieces)
            summary = self._summarize_local_text(partial[: self.max_input_chars])

        sentences = [s.strip() for s in re.split(r"(?<=[.?!])\s+", summary) if s.strip()]
        if not sentences:
            raise RuntimeError("Local summarizer returned no text")

        points = sentences[1:-1] if len(sentences) > 2 else sentences
        lines = [f"### {title}\n", sentences[0], "", "#### Key points:", ""]
        lines.extend(f"* {p}" for p in points)
        lines.extend(["", "#### Summary:", "", sentences[-1]])
        return "\n".join(lines)

    def summarize(self, text: str, title: str, language: str = "en",
                  settings: Optional[Dict[str, Any]] = None) -> str:
        """
        Produce a Markdown summary for one video.

        :param text: Summarizer input (title, description and transcript)
        :param title: Video title
        :param language: Output language code
        :param settings: Output settings dict; tone and summary style shape the prompt
        :return: Markdown summary; never raises
        """
        try:
            if self.provider == "local" and self.local_pipeline is not None:
                if language != "en":
                    logger.warning(f"Local summarizer only writes English, ignoring language '{language}'")
                return self._summarize_local(text, title)
            if self.provider == "gemini" and self.client is not None:
                return self._generate(build_summary_prompt(text, title, language, settings))
        except Exception as e:
            logger.warning(f"Summarization failed for '{title}': {e}. Using fallback summarizer.")
            return generate_basic_summary(text, title)

        return generate_basic_summary(text, title)

    def analyze(self, videos: List[Dict[str, Any]], questions: str, language: str = "en",
                settings: Optional[Dict[str, Any]] = None, feedback: Optional[str] = None) -> str:
        """
        Answer questions across the transcripts of several videos.

        :param videos: dicts with title, channel_title, url and transcript
        :param questions: User questions, free text
        :return: Markdown answers, or an explanatory message on failure
        """
        if self.client is None:
            logger.warning("Gemini API key is missing. Cannot analyze videos.")
            return MISSING_KEY_MESSAGE

        settings = resolve_output_settings(settings, language)
        prompt = build_analysis_prompt(videos, questions, language, settings, feedback)
        try:
            return self._generate(prompt)
        except Exception as e:
            logger.warning(f"All Gemini models failed: {e}")
            return ALL_MODELS_FAILED_MESSAGE
