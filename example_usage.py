#!/usr/bin/env python3
"""
Example usage script for the YouTube Video Summarizer.

Shows how to drive the pipeline programmatically: summarizing a batch,
asking questions across videos, checking relatedness directly and
exporting results.
"""

import os
import sys
import logging

# Add the current directory to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from utils import load_config, validate_query, validate_urls
from content_analyzer import ContentAnalyzer
from pipeline import VideoPipeline
from exporter import Exporter

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

EXAMPLE_URLS = [
    "https://www.youtube.com/watch?v=aircAruvnKk",
    "https://www.youtube.com/watch?v=IHZwWFHWa-w",
]


def example_basic_usage():
    """Summarize two videos with the default configuration."""
    print("🎬 Example 1: Basic Usage")
    print("=" * 50)

    config = load_config("config.yml")
    pipeline = VideoPipeline(config)

    is_valid, error_msg = validate_urls(EXAMPLE_URLS)
    if not is_valid:
        print(f"❌ {error_msg}")
        return

    result = pipeline.summarize(EXAMPLE_URLS, language="en")
    print(result['summary'])
    print(f"✅ Related: {result['are_videos_related']} | Videos: {result['video_count']}")


def example_analysis():
    """Ask questions across several videos and export the answer."""
    print("\n🎯 Example 2: Question Analysis")
    print("=" * 50)

    config = load_config("config.yml")
    pipeline = VideoPipeline(config)
    exporter = Exporter(config['export'])

    questions = "How do neural networks learn? What role does gradient descent play?"
    is_valid, error_msg = validate_query(questions)
    if not is_valid:
        print(f"❌ {error_msg}")
        return

    settings = dict(config['output'], summary_style='concise', include_references=False)
    result = pipeline.analyze(EXAMPLE_URLS, questions, language="en", settings=settings)
    if 'error' in result:
        print(f"❌ {result['error']}")
        return

    export_path = exporter.export("video_analysis", result['analysis'], settings, formats=['markdown', 'html'])
    print(f"✅ Analysis exported to: {export_path}")


def example_relatedness():
    """Score summaries directly without fetching anything."""
    print("\n🔗 Example 3: Relatedness Check")
    print("=" * 50)

    analyzer = ContentAnalyzer({'relatedness_threshold': 0.15})
    summaries = [
        "Neural networks learn weights from data.\n\n* Training uses gradient descent\n\nData quality matters.",
        "This video covers neural network training.\n\n* Backpropagation computes gradients\n\nTraining needs data.",
        "# Cooking pasta\n\nBoil water...\n\n* Use salt\n\nEnjoy your meal.",
    ]

    matrix = analyzer.pairwise_similarities(summaries)
    for i, row in enumerate(matrix):
        print(f"   Summary {i + 1}: " + "  ".join(f"{score:.2f}" for score in row))

    if analyzer.relatedness(summaries[:2]):
        print(analyzer.merge(summaries[:2], ["Neural networks 101", "Training explained"]))


def example_multilingual():
    """Summarize in Indonesian and export to PDF."""
    print("\n🌏 Example 4: Indonesian Output")
    print("=" * 50)

    config = load_config("config.yml")
    pipeline = VideoPipeline(config)
    exporter = Exporter(config['export'])

    result = pipeline.summarize(EXAMPLE_URLS[:1], language="id")
    settings = dict(config['output'], format='pdf', language='id')
    export_path = exporter.export("ringkasan_video", result['summary'], settings, formats=['markdown', 'pdf'])
    print(f"✅ Summary exported to: {export_path}")


def main():
    """Run all examples."""
    print("🎬 YouTube Video Summarizer - Example Usage")
    print("=" * 60)

    if not os.environ.get("GEMINI_API_KEY"):
        print("⚠️  GEMINI_API_KEY not set, summaries will use the basic fallback")
    if not os.environ.get("YOUTUBE_API_KEY"):
        print("⚠️  YOUTUBE_API_KEY not set, video details will use fallback data")

    try:
        example_basic_usage()
        example_analysis()
        example_relatedness()
        example_multilingual()

        print("\n🎉 All examples completed!")

    except Exception as e:
        logger.error(f"Error running examples: {e}")
        print(f"❌ Error: {e}")


if __name__ == "__main__":
    main()
