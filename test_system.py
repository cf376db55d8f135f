#!/usr/bin/env python3
"""
System tests for the YouTube Video Summarizer.

No network access is needed: API keys are read from unset environment
variables so every collaborator takes its fallback path, and the
generative client is replaced by fakes.
"""

import os
import sys
import json
import tempfile
from pathlib import Path

import yaml

# Add the current directory to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from utils import validate_query, validate_urls, create_cache_key, validate_and_set_defaults, get_default_config
from ingestion import (
    VideoLoader, extract_video_id, format_duration, format_view_count, format_offset,
    format_transcript, create_fallback_video_data,
)
from cache_service import CacheService
from prompts import (
    resolve_output_settings, build_analysis_prompt, build_summary_prompt,
    get_style_instructions, get_format_instructions, get_references_instructions,
)
from summarizer import VideoSummarizer, generate_basic_summary, MISSING_KEY_MESSAGE, ALL_MODELS_FAILED_MESSAGE
from synthesizer import Synthesizer, LIMITED_DATA_NOTICE
from pipeline import VideoPipeline
from exporter import Exporter, markdown_to_text, estimate_pages
from main import run_summarize

UNSET_YOUTUBE_ENV = "VIDEO_SUMMARIZER_TEST_UNSET_YOUTUBE_KEY"
UNSET_GEMINI_ENV = "VIDEO_SUMMARIZER_TEST_UNSET_GEMINI_KEY"

VIDEO_1 = "https://www.youtube.com/watch?v=aaaaaaaaaa1"
VIDEO_2 = "https://youtu.be/bbbbbbbbbb2"
VIDEO_3 = "https://www.youtube.com/embed/ccccccccc3c"

NEURAL_SUMMARY_1 = (
    "Neural network training relies on data and a model that learns weights.\n\n"
    "* Training data quality matters\n"
    "* The model uses gradient descent\n\n"
    "Neural network training needs good data."
)
NEURAL_SUMMARY_2 = (
    "This video explains neural network training with large data sets and how the model "
    "improves over many epochs of optimization.\n\n"
    "* Training data quality matters a lot\n"
    "* The model uses backpropagation\n\n"
    "Training a neural network model takes data and patience."
)
PASTA_SUMMARY = "# Cooking pasta\n\nBoil water...\n\n* Use salt\n\nEnjoy your meal."


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def generate_content(self, model, contents):
        self.calls.append((model, contents))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return FakeResponse(reply)


class FakeClient:
    def __init__(self, *replies):
        self.models = FakeModels(replies)


class FakeLoader:
    """Returns canned video data keyed by video ID."""

    def __init__(self, videos):
        self.videos = videos
        self.loaded = []

    def load(self, video_id, url=None, language=None, skip_cache=False):
        self.loaded.append(video_id)
        video = self.videos[video_id]
        return dict(video, video_id=video_id, url=url, fallback=video.get('fallback', False))


class FakeSummarizer:
    """Summarizes by looking up the title; analysis echoes the question."""

    def __init__(self, summaries):
        self.summaries = summaries

    def summarize(self, text, title, language="en", settings=None):
        return self.summaries[title]

    def analyze(self, videos, questions, language="en", settings=None, feedback=None):
        return f"### {questions}\n\nAnswered from {len(videos)} videos."


def _videos():
    return {
        'aaaaaaaaaa1': {'title': 'Intro to NNs', 'channel_title': 'ML Channel', 'transcript': 'neural text'},
        'bbbbbbbbbb2': {'title': 'Training deep nets', 'channel_title': 'AI Channel', 'transcript': 'training text'},
        'ccccccccc3c': {'title': 'Pasta night', 'channel_title': 'Food Channel', 'transcript': 'pasta text'},
    }


def _summaries():
    return {
        'Intro to NNs': NEURAL_SUMMARY_1,
        'Training deep nets': NEURAL_SUMMARY_2,
        'Pasta night': PASTA_SUMMARY,
    }


def test_utils():
    """Test utility functions."""
    print("🧪 Testing utility functions...")

    valid, msg = validate_query("What is the main argument?")
    assert valid, f"Query validation failed: {msg}"

    invalid, msg = validate_query("   ")
    assert not invalid, "Empty questions should be invalid"

    invalid, msg = validate_query("<script>alert(1)</script>")
    assert not invalid, "Script tags should be rejected"

    assert validate_urls([VIDEO_1])[0], "One URL is a valid batch"
    assert not validate_urls([])[0], "Empty batch should be invalid"
    assert not validate_urls([""])[0], "Blank URL batch should be invalid"

    assert create_cache_key("a", "b") == create_cache_key("a", "b"), "Cache keys should be consistent"

    config = validate_and_set_defaults({'analyzer': {'relatedness_threshold': 0.3}})
    assert config['analyzer']['relatedness_threshold'] == 0.3, "Override should win"
    assert config['analyzer']['stop_words'] == {}, "Missing keys come from defaults"
    assert config['cache'] == get_default_config()['cache'], "Untouched sections keep defaults"

    print("✅ Utility functions working correctly")


def test_video_helpers():
    """Test URL parsing and formatting helpers."""
    print("🧪 Testing video helpers...")

    assert extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"
    assert extract_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42") == "dQw4w9WgXcQ"
    assert extract_video_id("https://youtu.be/dQw4w9WgXcQ") == "dQw4w9WgXcQ"
    assert extract_video_id("https://www.youtube.com/embed/dQw4w9WgXcQ") == "dQw4w9WgXcQ"
    assert extract_video_id("https://example.com/page") is None, "Non-YouTube URL has no ID"
    assert extract_video_id("https://www.youtube.com/watch?v=short") is None, "IDs must be 11 chars"
    assert extract_video_id("") is None

    assert format_duration("PT1H2M3S") == "1:2:03"
    assert format_duration("PT4M5S") == "4:05"
    assert format_duration("PT45S") == "0:45"
    assert format_duration("") == ""

    assert format_view_count(0) == "Unknown views"
    assert format_view_count(999) == "999 views"
    assert format_view_count(1500) == "1.5K views"
    assert format_view_count(2_300_000) == "2.3M views"
    assert format_view_count(1_000_000_000) == "1.0B views"

    assert format_offset(75.4) == "01:15"

    text = format_transcript([], "Title A", "Desc A")
    assert "No transcript available" in text and "Title: Title A" in text

    text = format_transcript([{'text': 'hello there', 'offset': 5.2, 'duration': 1.0}], "T", "D")
    assert text.startswith("Title: T\n\nDescription: D\n\nTranscript:\n\n"), "Transcript header"
    assert "[00:05] hello there\n" in text, "Timestamped transcript lines"

    fallback = create_fallback_video_data("dQw4w9WgXcQ", None)
    assert fallback['fallback'] and fallback['title'] == "YouTube Video (ID: dQw4w9WgXcQ)"
    assert fallback['url'] == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    print("✅ Video helpers working correctly")


def test_video_loader_fallback():
    """Without an API key the loader returns fallback data."""
    print("🧪 Testing video loader fallback...")

    loader = VideoLoader({'api_key_env': UNSET_YOUTUBE_ENV})
    data = loader.load("dQw4w9WgXcQ", "https://youtu.be/dQw4w9WgXcQ", "en")
    assert data['fallback'], "Missing key should produce fallback data"
    assert data['channel_title'] == "Unknown Channel"
    assert data['url'] == "https://youtu.be/dQw4w9WgXcQ", "Original URL is kept"
    assert "Unable to fetch transcript" in data['transcript']

    print("✅ Video loader fallback working correctly")


def test_video_loader_language_cache():
    """Cached video data is kept apart per transcript language."""
    print("🧪 Testing video loader language caching...")

    with tempfile.TemporaryDirectory() as temp_dir:
        loader = VideoLoader({'api_key': 'test-key'}, cache=CacheService({'cache_dir': temp_dir}))
        fetched = []

        def fake_info(video_id):
            return {'video_id': video_id, 'title': 'Captions', 'channel_title': 'C', 'description': 'D'}

        def fake_transcript(video_id, language=None):
            fetched.append(language)
            return [{'text': f"caption-{language}", 'offset': 0, 'duration': 1.0}]

        loader.fetch_video_info = fake_info
        loader.fetch_transcript = fake_transcript

        english = loader.load("dQw4w9WgXcQ", language="en")
        indonesian = loader.load("dQw4w9WgXcQ", language="id")
        assert "[00:00] caption-en" in english['transcript']
        assert "[00:00] caption-id" in indonesian['transcript'], "Other language must not reuse cached captions"
        assert fetched == ["en", "id"]

        again = loader.load("dQw4w9WgXcQ", language="id")
        assert again['transcript'] == indonesian['transcript'], "Cache hit returns the same text"
        assert fetched == ["en", "id"], "Second request in the same language is served from cache"

    print("✅ Video loader language caching working correctly")


def test_cache_service():
    """Test cache storage, expiry and maintenance."""
    print("🧪 Testing cache service...")

    with tempfile.TemporaryDirectory() as temp_dir:
        cache = CacheService({'cache_dir': temp_dir})

        cache.cache_summary([VIDEO_1, VIDEO_2], "summary text", "en", are_videos_related=True, video_count=2)
        cached = cache.get_cached_summary([VIDEO_1, VIDEO_2], "en")
        assert cached is not None, "Same batch should hit"
        assert cached['summary'] == "summary text" and cached['are_videos_related']
        assert cache.get_cached_summary([VIDEO_2, VIDEO_1], "en") is None, "URL order is part of the key"
        assert cache.get_cached_summary([VIDEO_1, VIDEO_2], "id") is None, "Language is part of the key"

        cache.cache_analysis([VIDEO_1], "Why?", "analysis text", "en")
        assert cache.get_cached_analysis([VIDEO_1], "Why?", "en")['analysis'] == "analysis text"
        assert cache.get_cached_analysis([VIDEO_1], "How?", "en") is None, "Questions are part of the key"

        cache.cache_video_data({'video_id': 'dQw4w9WgXcQ', 'title': 'T', 'transcript': 'x'}, "en")
        assert cache.get_cached_video_data('dQw4w9WgXcQ', "en")['title'] == 'T'
        assert cache.get_cached_video_data('dQw4w9WgXcQ', "id") is None, "Video data is cached per language"

        stats = cache.get_stats()
        assert stats['summary_count'] == 1 and stats['analysis_count'] == 1 and stats['video_data_count'] == 1
        assert stats['total_size'] != "0B"

        assert cache.clear() == 3, "Clear should remove every entry"
        assert cache.get_stats()['summary_count'] == 0

    with tempfile.TemporaryDirectory() as temp_dir:
        expired = CacheService({'cache_dir': temp_dir, 'summary_ttl_hours': -1})
        expired.cache_summary([VIDEO_1], "old", "en")
        assert expired.get_cached_summary([VIDEO_1], "en") is None, "Expired entries are misses"
        assert expired.get_stats()['summary_count'] == 0, "Expired entries are removed on read"

        disabled = CacheService({'cache_dir': temp_dir, 'enabled': False})
        disabled.cache_summary([VIDEO_1], "text", "en")
        assert disabled.get_cached_summary([VIDEO_1], "en") is None, "Disabled cache never hits"

    print("✅ Cache service working correctly")


def test_prompts():
    """Test instruction builders."""
    print("🧪 Testing prompt builders...")

    settings = resolve_output_settings({'format': 'pdf', 'font_size': None}, language='id')
    assert settings['format'] == 'pdf' and settings['font_size'] == 12, "None values fall back to defaults"
    assert settings['language'] == 'id'

    assert "PDF" in get_format_instructions(settings, 'id')
    assert get_format_instructions(dict(settings, format='markdown'), 'fr').startswith("Format the answer in Markdown")

    informal = resolve_output_settings({'formal_tone': False, 'summary_style': 'concise'})
    style = get_style_instructions(informal, 'en')
    assert "conversational" in style and "concise" in style

    assert get_references_instructions(resolve_output_settings({'include_references': False}), 'en') == ""

    videos = [{'title': 'T1', 'channel_title': 'C1', 'url': VIDEO_1, 'transcript': 'Transcript one'}]
    prompt = build_analysis_prompt(videos, "What is it?", 'id', settings, feedback="Shorter please")
    assert "bahasa Indonesia" in prompt, "Language instruction included"
    assert 'VIDEO 1: "T1" by C1' in prompt and "Transcript one" in prompt
    assert "USER FEEDBACK: Shorter please" in prompt
    assert "QUESTIONS:\nWhat is it?" in prompt

    assert 'The video title is: "T1"' in build_summary_prompt("body", "T1", "es")
    assert "Spanish" in build_summary_prompt("body", "T1", "es")
    concise = build_summary_prompt("body", "T1", "en", {'summary_style': 'concise', 'formal_tone': False})
    assert "concise answers" in concise and "conversational" in concise, "Summary prompt follows output settings"

    print("✅ Prompt builders working correctly")


def test_basic_summary():
    """Test the rule-based fallback summary."""
    print("🧪 Testing basic summary...")

    text = ("Title: How to bake bread\n\nDescription: Knead the dough well. Let it rise for an hour. "
            "Bake at high heat.\n\n(This is a simulated transcript for demonstration purposes.)")
    summary = generate_basic_summary(text, "ignored")
    assert summary.startswith("### How to bake bread\n\n"), "Title line is parsed from the text"
    assert "a tutorial or guide" in summary
    assert "* Knead the dough well\n* Let it rise for an hour\n* Bake at high heat\n" in summary
    assert "#### Summary:" in summary

    summary = generate_basic_summary("no structure at all", "Deep Sea Creatures Explained")
    assert "a topic related to Deep Sea Creatures" in summary, "Title argument used when text has none"
    assert "* Limited information available from the video\n" in summary

    print("✅ Basic summary working correctly")


def test_summarizer():
    """Test model fallback order and failure handling."""
    print("🧪 Testing summarizer...")

    no_key = VideoSummarizer({'api_key_env': UNSET_GEMINI_ENV})
    assert no_key.client is None
    summary = no_key.summarize("Title: Space\n\nDescription: Rockets fly very high indeed.", "Space")
    assert summary.startswith("### Space"), "Missing key falls back to basic summary"
    assert no_key.analyze([], "Why?") == MISSING_KEY_MESSAGE

    client = FakeClient(RuntimeError("model gone"), "Overview.\n\n* Point\n\nDone here.")
    summarizer = VideoSummarizer({'models': ['model-a', 'model-b']}, client=client)
    assert summarizer.summarize("text", "Title") == "Overview.\n\n* Point\n\nDone here."
    assert [c[0] for c in client.models.calls] == ['model-a', 'model-b'], "Models are tried in order"

    failing = VideoSummarizer({'models': ['model-a']}, client=FakeClient(RuntimeError("quota")))
    assert failing.summarize("Title: Cars\n\nDescription: x", "Cars").startswith("### Cars"), \
        "All models failing falls back to basic summary"

    failing = VideoSummarizer({'models': ['model-a']}, client=FakeClient(RuntimeError("quota")))
    videos = [{'title': 'T', 'channel_title': 'C', 'url': VIDEO_1, 'transcript': 'x'}]
    assert failing.analyze(videos, "Why?") == ALL_MODELS_FAILED_MESSAGE

    styled_client = FakeClient("Overview.")
    styled = VideoSummarizer({'models': ['model-a']}, client=styled_client)
    styled.summarize("text", "Title", "en", {'summary_style': 'detailed'})
    assert "detailed and comprehensive" in styled_client.models.calls[0][1], "Settings reach the summary prompt"

    answering = VideoSummarizer({'models': ['model-a']}, client=FakeClient("## Why?\n\nBecause."))
    assert answering.analyze(videos, "Why?", language='en') == "## Why?\n\nBecause."

    print("✅ Summarizer working correctly")


def test_synthesizer():
    """Test merge-or-concatenate decisions."""
    print("🧪 Testing synthesizer...")

    synthesizer = Synthesizer({})
    neural = [
        {'title': 'Intro to NNs', 'channel_title': 'ML', 'url': VIDEO_1, 'summary': NEURAL_SUMMARY_1},
        {'title': 'Training deep nets', 'channel_title': 'AI', 'url': VIDEO_2, 'summary': NEURAL_SUMMARY_2},
    ]

    document, related = synthesizer.combine(neural)
    assert related, "Neural network summaries should be related"
    assert document.startswith("# Combined Summary of Related Videos"), "Related videos are merged"
    assert "1. Intro to NNs\n2. Training deep nets\n" in document
    assert document.count("* Training data quality matters") == 1, "Overlapping bullets deduplicated"

    mixed = [
        neural[0],
        {'title': 'Pasta night', 'channel_title': 'Food', 'url': VIDEO_3, 'summary': PASTA_SUMMARY, 'fallback': True},
    ]
    document, related = synthesizer.combine(mixed, [{'message': 'Invalid YouTube URL: x'}])
    assert not related, "Unrelated summaries are kept apart"
    assert document.count("## Summary for [") == 2
    assert document.index("Intro to NNs") < document.index("Pasta night"), "Input order is kept"
    assert "*Channel: ML*" in document
    assert LIMITED_DATA_NOTICE in document, "Fallback videos carry the limited-data notice"
    assert document.count("---\n\n") == 2, "Each individual summary ends with a rule"
    assert document.endswith("\n## Errors\n\nInvalid YouTube URL: x\n\n")

    document, related = synthesizer.combine([neural[0]])
    assert not related, "A single summary is never related"
    assert document == f"## Summary for [Intro to NNs]({VIDEO_1})\n\n*Channel: ML*\n\n{NEURAL_SUMMARY_1}\n\n"

    document, related = synthesizer.combine([], [{'message': 'boom'}])
    assert document == "\n## Errors\n\nboom\n\n"

    analysis = synthesizer.format_analysis(
        [{'title': 'T1', 'url': VIDEO_1, 'channel_title': 'C1'}], "Answer.", [{'message': 'bad url'}]
    )
    assert analysis == f"## Videos Analyzed\n\n1. [T1]({VIDEO_1}) - C1\n\n---\n\nAnswer.\n\n## Errors\n\n- bad url\n"

    print("✅ Synthesizer working correctly")


def test_pipeline():
    """Test batch summarization and analysis with fake collaborators."""
    print("🧪 Testing pipeline...")

    with tempfile.TemporaryDirectory() as temp_dir:
        config = get_default_config()
        config['cache']['cache_dir'] = temp_dir
        loader = FakeLoader(_videos())
        pipeline = VideoPipeline(config, loader=loader, summarizer=FakeSummarizer(_summaries()))

        result = pipeline.summarize([VIDEO_1, "https://example.com/nope", VIDEO_2])
        assert result['are_videos_related'], "Neural videos should be related"
        assert result['video_count'] == 2 and result['error_count'] == 1
        assert "Combined Summary of Related Videos" in result['summary']
        assert "Invalid YouTube URL: https://example.com/nope" in result['summary']
        assert not result['from_cache']

        # Batches with errors are not cached
        again = pipeline.summarize([VIDEO_1, "https://example.com/nope", VIDEO_2])
        assert not again['from_cache'], "Failed batches should not be cached"

        result = pipeline.summarize([VIDEO_1, VIDEO_3])
        assert not result['are_videos_related']
        assert result['summary'].index("Intro to NNs") < result['summary'].index("Pasta night")

        cached = pipeline.summarize([VIDEO_1, VIDEO_3])
        assert cached['from_cache'], "Same batch in the same order hits the cache"
        assert cached['summary'] == result['summary'], "Cached output is identical"

        fresh = pipeline.summarize([VIDEO_1, VIDEO_3], skip_cache=True)
        assert not fresh['from_cache'] and fresh['summary'] == result['summary']

        # Reordered batches keep their own order, cached or not
        reordered = pipeline.summarize([VIDEO_3, VIDEO_1])
        assert not reordered['from_cache'], "Another submission order is another batch"
        assert reordered['summary'].startswith("## Summary for [Pasta night]")
        reordered_cached = pipeline.summarize([VIDEO_3, VIDEO_1])
        reordered_fresh = pipeline.summarize([VIDEO_3, VIDEO_1], skip_cache=True)
        assert reordered_cached['from_cache']
        assert reordered_cached['summary'] == reordered_fresh['summary'], \
            "Cache hit and fresh run must produce the same document"

        try:
            pipeline.summarize([])
            assert False, "Empty batch should be rejected"
        except ValueError:
            pass

        analysis = pipeline.analyze([VIDEO_1, VIDEO_2], "What is backprop?")
        assert analysis['analysis'].startswith("## Videos Analyzed\n\n1. [Intro to NNs]")
        assert "Answered from 2 videos." in analysis['analysis']
        assert pipeline.analyze([VIDEO_1, VIDEO_2], "What is backprop?")['from_cache'], "Analysis is cached"

        with_feedback = pipeline.analyze([VIDEO_1, VIDEO_2], "What is backprop?", feedback="more detail")
        assert not with_feedback['from_cache'], "Feedback bypasses the cache"

        edited = pipeline.analyze([VIDEO_1], "Q", edited_content="My edit")
        assert edited['is_edited'] and edited['analysis'] == "My edit"

        failed = pipeline.analyze(["not a url"], "Q")
        assert failed['error'] == "Could not process any of the provided videos"

    print("✅ Pipeline working correctly")


def test_exporter():
    """Test export functionality."""
    print("🧪 Testing exporter...")

    content = (
        "# Combined Summary of Related Videos\n\n## Videos Analyzed\n\n1. Intro to NNs\n2. Training deep nets\n\n"
        "## Overview\n\nNeural **network** training with *data*.\n\n"
        "## Key Points From All Videos\n\n* Training data quality matters\n* The model uses `backprop`\n\n"
        "---\n\n## Overall Conclusion\n\nTraining takes data & patience.\n"
    )

    with tempfile.TemporaryDirectory() as temp_dir:
        exporter = Exporter({'output_dir': temp_dir, 'formats': ['markdown', 'json', 'html', 'pdf', 'docx']})
        export_path = exporter.export("Video Summary", content)

        assert export_path is not None, "Should return export path"
        assert export_path.endswith(".md") and os.path.exists(export_path), "Markdown is the primary file"
        assert Path(export_path).read_text(encoding="utf-8") == content

        for pattern in ("*.json", "*.html", "*.pdf", "*.docx"):
            files = list(Path(temp_dir).glob(pattern))
            assert len(files) == 1 and files[0].stat().st_size > 0, f"Should create {pattern} file"

        data = json.loads(next(Path(temp_dir).glob("*.json")).read_text(encoding="utf-8"))
        assert data['content'] == content and data['metadata']['title'] == "Video Summary"

        html = next(Path(temp_dir).glob("*.html")).read_text(encoding="utf-8")
        assert "<h2>Overview</h2>" in html and "<li>Training data quality matters</li>" in html

        stats = exporter.get_export_stats()
        assert stats['output_dir'] == temp_dir and stats['total_files'] == 5

        only_unknown = exporter.export("x", content, formats=['rtf'])
        assert only_unknown is None, "Unsupported formats produce nothing"

    text = markdown_to_text("## Title\n\n* **Bold** point\n\n[link](http://x)\n\n---\n")
    assert "Title" in text and "• Bold point" in text and "link" in text and "---" not in text and "#" not in text

    assert estimate_pages("x") == 1
    assert estimate_pages("\n".join(["line"] * 60), font_size=12, line_spacing=1.5) == 2

    print("✅ Exporter working correctly")


def test_integration():
    """Test the CLI flow end to end with fallback collaborators."""
    print("🧪 Testing system integration...")

    with tempfile.TemporaryDirectory() as temp_dir:
        config = get_default_config()
        config['youtube']['api_key_env'] = UNSET_YOUTUBE_ENV
        config['summarizer']['api_key_env'] = UNSET_GEMINI_ENV
        config['cache']['cache_dir'] = os.path.join(temp_dir, 'cache')
        config['export']['output_dir'] = os.path.join(temp_dir, 'exports')
        config['logging']['log_file'] = os.path.join(temp_dir, 'logs', 'test.log')

        config_path = os.path.join(temp_dir, 'config.yml')
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config, f)

        result = run_summarize([VIDEO_1, VIDEO_2], config_path=config_path)
        assert result is not None, "Should complete full pipeline"
        assert result['video_count'] == 2 and result['error_count'] == 0

        # Both fallback summaries describe unavailable videos, so they overlap heavily
        assert result['are_videos_related'], "Fallback summaries should be related"
        summary = result['summary']
        assert summary.startswith("# Combined Summary of Related Videos")
        assert summary.count("* Consider watching the full video for more details") == 1

        exports = list(Path(temp_dir, 'exports').glob("*.md"))
        assert len(exports) == 1, "Should create export file"

        assert run_summarize([], config_path=config_path) is None, "Empty batch is rejected"

    print("✅ System integration working correctly")


def main():
    """Run all tests."""
    print("🧪 YouTube Video Summarizer - System Tests")
    print("=" * 50)

    try:
        test_utils()
        test_video_helpers()
        test_video_loader_fallback()
        test_video_loader_language_cache()
        test_cache_service()
        test_prompts()
        test_basic_summary()
        test_summarizer()
        test_synthesizer()
        test_pipeline()
        test_exporter()
        test_integration()

        print("\n🎉 All tests passed successfully!")
        print("✅ The YouTube Video Summarizer is working correctly.")

    except Exception as e:
        print(f"\n❌ Test failed: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
