# Entry point (CLI to summarize or question YouTube videos)

import sys
import argparse
import logging
from typing import List, Optional
from utils import load_config, validate_query, validate_urls
from cache_service import CacheService
from pipeline import VideoPipeline
from exporter import Exporter

logger = logging.getLogger(__name__)


def _export(cfg: dict, title: str, content: str, language: str, fmt: Optional[str]) -> None:
    print('\n💾 Exporting results...')
    exporter = Exporter(cfg.get('export', {}))
    settings = dict(cfg.get('output', {}), language=language)
    formats = None
    if fmt:
        settings['format'] = fmt
        formats = sorted({'markdown', fmt})
    export_path = exporter.export(title, content, settings, formats)
    if export_path:
        print(f'✅ Export complete: {export_path}')
    else:
        print('❌ Export failed, see the log for details')


def run_summarize(urls: List[str], config_path: str = "config.yml", language: Optional[str] = None,
                  fmt: Optional[str] = None, skip_cache: bool = False, export: bool = True):
    """
    Summarize one or more videos and print the combined document.

    :param urls: YouTube video URLs
    :param config_path: Path to configuration file
    :param language: Output language code
    :param fmt: Extra export format (pdf, docx, html, json)
    """
    cfg = load_config(config_path)
    language = language or cfg.get('youtube', {}).get('default_language', 'en')

    is_valid, error_msg = validate_urls(urls)
    if not is_valid:
        print(f"Error: {error_msg}")
        return None

    print("🎬 YouTube Video Summarizer")
    print(f"Videos: {len(urls)} | Language: {language}")
    print("=" * 50)

    try:
        pipeline = VideoPipeline(cfg)
        result = pipeline.summarize(urls, language=language, skip_cache=skip_cache)

        print('\n' + '=' * 50)
        print('📝 SUMMARY')
        print('=' * 50)
        print(result['summary'])

        print('\n📊 Run Summary:')
        print(f"   Videos summarized: {result['video_count']}")
        print(f"   Errors: {result['error_count']}")
        print(f"   Videos related: {'yes' if result['are_videos_related'] else 'no'}")
        print(f"   From cache: {'yes' if result['from_cache'] else 'no'}")

        if export and result['summary']:
            _export(cfg, "video_summary", result['summary'], language, fmt)
        return result

    except Exception as e:
        logger.error(f"Error during summarization: {e}")
        print(f"❌ Error: {e}")
        raise


def run_analyze(urls: List[str], questions: str, config_path: str = "config.yml",
                language: Optional[str] = None, fmt: Optional[str] = None, skip_cache: bool = False,
                feedback: Optional[str] = None, export: bool = True):
    """Answer questions across one or more videos and print the answers."""
    cfg = load_config(config_path)
    language = language or cfg.get('youtube', {}).get('default_language', 'en')

    for is_valid, error_msg in (validate_urls(urls), validate_query(questions)):
        if not is_valid:
            print(f"Error: {error_msg}")
            return None

    print("🎬 YouTube Video Analyzer")
    print(f"Videos: {len(urls)} | Language: {language}")
    print(f"Questions: {questions}")
    print("=" * 50)

    try:
        pipeline = VideoPipeline(cfg)
        settings = dict(cfg.get('output', {}), format=fmt) if fmt else None
        result = pipeline.analyze(urls, questions, language=language, settings=settings,
                                  skip_cache=skip_cache, feedback=feedback)

        if 'error' in result:
            print(f"❌ {result['error']}")
            return result

        print('\n' + '=' * 50)
        print('🎯 ANALYSIS')
        print('=' * 50)
        print(result['analysis'])

        print('\n📊 Run Summary:')
        print(f"   Videos analyzed: {result['video_count']}")
        print(f"   Errors: {result['error_count']}")
        print(f"   From cache: {'yes' if result['from_cache'] else 'no'}")

        if export:
            _export(cfg, "video_analysis", result['analysis'], language, fmt)
        return result

    except Exception as e:
        logger.error(f"Error during analysis: {e}")
        print(f"❌ Error: {e}")
        raise


def run_cache_command(command: str, config_path: str = "config.yml"):
    cfg = load_config(config_path)
    cache = CacheService(cfg.get('cache', {}))
    if command == 'clear-cache':
        removed = cache.clear()
        print(f"🧹 Cleared {removed} cached items")
    else:
        stats = cache.get_stats()
        print("💾 Cache statistics:")
        print(f"   Video data entries: {stats['video_data_count']}")
        print(f"   Summary entries: {stats['summary_count']}")
        print(f"   Analysis entries: {stats['analysis_count']}")
        print(f"   Total size: {stats['total_size']}")


def main(argv: Optional[List[str]] = None):
    """Main entry point for CLI usage."""
    parser = argparse.ArgumentParser(
        description="YouTube Video Summarizer - Summarize, compare and question YouTube videos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py summarize https://youtu.be/VIDEO_ID_01 https://youtu.be/VIDEO_ID_02
  python main.py summarize https://youtu.be/VIDEO_ID_01 --language id --format pdf
  python main.py analyze https://youtu.be/VIDEO_ID_01 -q "What are the main arguments?"
  python main.py cache-stats
        """
    )
    parser.add_argument('--config', type=str, default='config.yml',
                        help='Path to configuration file (default: config.yml)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    for name, help_text in (('summarize', 'Summarize videos, merging related ones'),
                            ('analyze', 'Answer questions about videos')):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('urls', nargs='+', help='YouTube video URLs')
        sub.add_argument('--language', '-l', type=str, default=None, help='Output language code (e.g. en, id, es)')
        sub.add_argument('--format', '-f', choices=['markdown', 'pdf', 'docx', 'html', 'json'], default=None,
                         help='Additional export format')
        sub.add_argument('--skip-cache', action='store_true', help='Ignore cached results')
        sub.add_argument('--no-export', action='store_true', help='Print only, do not write files')
        if name == 'analyze':
            sub.add_argument('--questions', '-q', type=str, required=True, help='Questions to answer')
            sub.add_argument('--feedback', type=str, default=None, help='Feedback on a previous answer')

    subparsers.add_parser('cache-stats', help='Show cache statistics')
    subparsers.add_parser('clear-cache', help='Remove all cached entries')

    args = parser.parse_args(argv)

    # Set logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == 'summarize':
        result = run_summarize(args.urls, args.config, args.language, args.format,
                               args.skip_cache, not args.no_export)
    elif args.command == 'analyze':
        result = run_analyze(args.urls, args.questions, args.config, args.language, args.format,
                             args.skip_cache, args.feedback, not args.no_export)
    else:
        run_cache_command(args.command, args.config)
        return

    if result is None:
        sys.exit(1)


if __name__ == '__main__':
    main()
