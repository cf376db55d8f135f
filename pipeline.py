"""
Batch pipeline: fetch every video of a request, summarize or analyze it,
and synthesize the final document.

Per-video work runs in a thread pool; results keep input order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Dict, Any, Optional
from tqdm import tqdm

from cache_service import CacheService
from content_analyzer import ContentAnalyzer
from ingestion import VideoLoader, extract_video_id
from prompts import resolve_output_settings
from summarizer import VideoSummarizer, MISSING_KEY_MESSAGE, ALL_MODELS_FAILED_MESSAGE
from synthesizer import Synthesizer
from utils import measure_time

logger = logging.getLogger(__name__)


class VideoPipeline:
    """
    Wires the loader, summarizer, analyzer and cache for batch requests.
    """

    def __init__(self, config: Dict[str, Any], loader: Optional[VideoLoader] = None,
                 summarizer: Optional[VideoSummarizer] = None, cache: Optional[CacheService] = None):
        """
        :param config: Full application configuration
        :param loader: Optional VideoLoader, built from config['youtube'] otherwise
        :param summarizer: Optional VideoSummarizer, built from config['summarizer'] otherwise
        :param cache: Optional CacheService, built from config['cache'] otherwise
        """
        self.config = config or {}
        self.cache = cache if cache is not None else CacheService(self.config.get('cache', {}))
        self.loader = loader or VideoLoader(self.config.get('youtube', {}), cache=self.cache)
        self.summarizer = summarizer or VideoSummarizer(self.config.get('summarizer', {}))
        self.analyzer = ContentAnalyzer(self.config.get('analyzer', {}))
        self.synthesizer = Synthesizer(analyzer=self.analyzer)
        self.max_workers = int(self.config.get('youtube', {}).get('max_workers', 4))
        self.default_settings = self.config.get('output', {})

    def _run_parallel(self, func, urls: List[str], desc: str) -> List[Dict[str, Any]]:
        workers = max(1, min(self.max_workers, len(urls)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(tqdm(executor.map(func, urls), total=len(urls), desc=desc, disable=len(urls) < 2))

    def _summarize_one(self, url: str, language: str, settings: Dict[str, Any]) -> Dict[str, Any]:
        video_id = extract_video_id(url)
        if not video_id:
            return {
                'error': True,
                'message': f"⚠️ Invalid YouTube URL: {url}\n\nCould not extract a valid YouTube video ID from this URL.",
                'url': url,
            }

        try:
            video = self.loader.load(video_id, url, language)
            summary = self.summarizer.summarize(video['transcript'], video['title'], language, settings)
            return {
                'error': False,
                'video_id': video_id,
                'title': video['title'],
                'channel_title': video['channel_title'],
                'url': video['url'],
                'summary': summary,
                'fallback': video.get('fallback', False),
            }
        except Exception as e:
            logger.error(f"Error processing URL {url}: {e}")
            return {
                'error': True,
                'message': f"⚠️ Failed to summarize video: {url}\n\nError: {e}",
                'url': url,
            }

    def _load_one(self, url: str, language: str) -> Dict[str, Any]:
        video_id = extract_video_id(url)
        if not video_id:
            return {'error': True, 'message': f"Invalid YouTube URL: {url}", 'url': url}

        try:
            return dict(self.loader.load(video_id, url, language), error=False)
        except Exception as e:
            logger.error(f"Error processing URL {url}: {e}")
            return {'error': True, 'message': f"Failed to process video: {url}", 'url': url}

    @measure_time
    def summarize(self, urls: List[str], language: str = "en", settings: Optional[Dict[str, Any]] = None,
                  skip_cache: bool = False) -> Dict[str, Any]:
        """
        Summarize a batch of videos.

        :param urls: Video URLs, in the order they should appear
        :param language: Output language code
        :param settings: Output settings dict
        :param skip_cache: Ignore a cached summary for this batch
        :return: dict with summary, are_videos_related, video_count,
                 error_count and from_cache
        """
        if not urls:
            raise ValueError("Please provide at least one valid YouTube URL")

        if not skip_cache:
            cached = self.cache.get_cached_summary(urls, language)
            if cached:
                logger.info(f"Using cached summary for {', '.join(urls)}")
                return {
                    'summary': cached['summary'],
                    'are_videos_related': cached.get('are_videos_related', False),
                    'video_count': cached.get('video_count', len(urls)),
                    'error_count': 0,
                    'from_cache': True,
                }

        settings = resolve_output_settings(settings or self.default_settings, language)
        video_results = self._run_parallel(
            lambda url: self._summarize_one(url, language, settings), urls, "Summarizing videos"
        )

        successful = [r for r in video_results if not r['error']]
        errors = [r for r in video_results if r['error']]

        final_summary, related = self.synthesizer.combine(successful, errors, language)

        if not errors:
            self.cache.cache_summary(urls, final_summary, language, settings,
                                     are_videos_related=related, video_count=len(successful))

        return {
            'summary': final_summary,
            'are_videos_related': related,
            'video_count': len(successful),
            'error_count': len(errors),
            'from_cache': False,
        }

    @measure_time
    def analyze(self, urls: List[str], questions: str, language: str = "en",
                settings: Optional[Dict[str, Any]] = None, skip_cache: bool = False,
                feedback: Optional[str] = None, edited_content: Optional[str] = None) -> Dict[str, Any]:
        """
        Answer questions across a batch of videos.

        Edited content is returned as-is. Results are cached only when every
        video loaded and no feedback was given.

        :return: dict with analysis, video_count, error_count, from_cache and
                 is_edited, or an 'error' key when no video could be loaded
        """
        if not urls:
            raise ValueError("Please provide at least one valid YouTube URL")

        if edited_content:
            return {
                'analysis': edited_content,
                'video_count': len(urls),
                'error_count': 0,
                'from_cache': False,
                'is_edited': True,
            }

        if not skip_cache and not feedback:
            cached = self.cache.get_cached_analysis(urls, questions, language)
            if cached:
                logger.info(f"Using cached analysis for {', '.join(urls)}")
                return {
                    'analysis': cached['analysis'],
                    'video_count': len(urls),
                    'error_count': 0,
                    'from_cache': True,
                    'is_edited': False,
                }

        settings = resolve_output_settings(settings or self.default_settings, language)
        video_results = self._run_parallel(lambda url: self._load_one(url, language), urls, "Loading videos")

        successful = [r for r in video_results if not r['error']]
        errors = [r for r in video_results if r['error']]

        if not successful:
            return {
                'error': "Could not process any of the provided videos",
                'video_count': 0,
                'error_count': len(errors),
            }

        analysis = self.summarizer.analyze(successful, questions, language, settings, feedback)
        final_response = self.synthesizer.format_analysis(successful, analysis, errors)

        if not errors and not feedback and analysis not in (MISSING_KEY_MESSAGE, ALL_MODELS_FAILED_MESSAGE):
            self.cache.cache_analysis(urls, questions, final_response, language, settings)

        return {
            'analysis': final_response,
            'video_count': len(successful),
            'error_count': len(errors),
            'from_cache': False,
            'is_edited': False,
        }
