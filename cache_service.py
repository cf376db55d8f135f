"""
File-backed key-value cache for video metadata, summaries and analyses.

Each entry is a JSON file under the cache directory carrying the time it
was stored; entries older than their kind's expiry are removed on read.
"""

import os
import json
import time
import logging
from typing import List, Dict, Any, Optional
from utils import ensure_directory, create_cache_key, format_file_size

logger = logging.getLogger(__name__)

CACHE_KEYS = {
    'video_data': 'youtube_video_data_',
    'summary': 'youtube_summary_',
    'analysis': 'youtube_analysis_',
}

HOUR = 60 * 60


class CacheService:
    """
    Keyed lookup/store of previously computed results with per-kind expiry.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize cache with configuration.

        :param config: Configuration dictionary containing cache settings
        """
        self.config = config or {}
        self.enabled = self.config.get('enabled', True)
        self.cache_dir = self.config.get('cache_dir', 'cache')
        self.expiry = {
            'video_data': float(self.config.get('video_data_ttl_hours', 7 * 24)) * HOUR,
            'summary': float(self.config.get('summary_ttl_hours', 24)) * HOUR,
            'analysis': float(self.config.get('analysis_ttl_hours', 24)) * HOUR,
        }

        if self.enabled:
            ensure_directory(self.cache_dir)

        logger.info(f"CacheService initialized. Enabled: {self.enabled}, Cache dir: {self.cache_dir}")

    # Key generation

    @staticmethod
    def video_data_key(video_id: str, language: str) -> str:
        # Transcripts are fetched per language
        return f"{CACHE_KEYS['video_data']}{video_id}_{language}"

    @staticmethod
    def summary_key(urls: List[str], language: str) -> str:
        # Submission order is part of the key: documents list videos in input order
        return f"{CACHE_KEYS['summary']}{create_cache_key(*urls)}_{language}"

    @staticmethod
    def analysis_key(urls: List[str], questions: str, language: str) -> str:
        questions_hash = create_cache_key(questions)
        return f"{CACHE_KEYS['analysis']}{create_cache_key(*urls)}_{questions_hash}_{language}"

    # Low-level storage

    def _path(self, key: str) -> str:
        return os.path.join(self.cache_dir, f"{key}.json")

    def _is_expired(self, timestamp: float, kind: str) -> bool:
        return time.time() - timestamp > self.expiry[kind]

    def _store(self, key: str, data: Dict[str, Any]) -> None:
        if not self.enabled:
            return
        data = dict(data, timestamp=time.time())
        try:
            with open(self._path(key), "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            logger.debug(f"Cached entry {key}")
        except Exception as e:
            logger.error(f"Error caching entry {key}: {e}")

    def _load(self, key: str, kind: str) -> Optional[Dict[str, Any]]:
        if not self.enabled:
            return None
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except Exception as e:
            logger.error(f"Error retrieving cached entry {key}: {e}")
            return None

        if self._is_expired(data.get('timestamp', 0), kind):
            logger.debug(f"Cache entry {key} expired")
            self._remove(path)
            return None

        return data

    def _remove(self, path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove cache file {path}: {e}")

    # Video data

    def cache_video_data(self, video_data: Dict[str, Any], language: str) -> None:
        """Store metadata and transcript text for one video in one language."""
        self._store(self.video_data_key(video_data['video_id'], language), video_data)

    def get_cached_video_data(self, video_id: str, language: str) -> Optional[Dict[str, Any]]:
        return self._load(self.video_data_key(video_id, language), 'video_data')

    # Summaries

    def cache_summary(self, urls: List[str], summary: str, language: str,
                      output_settings: Optional[Dict[str, Any]] = None,
                      are_videos_related: bool = False, video_count: Optional[int] = None) -> None:
        self._store(self.summary_key(urls, language), {
            'urls': list(urls),
            'summary': summary,
            'language': language,
            'output_settings': output_settings,
            'are_videos_related': are_videos_related,
            'video_count': len(urls) if video_count is None else video_count,
        })

    def get_cached_summary(self, urls: List[str], language: str) -> Optional[Dict[str, Any]]:
        return self._load(self.summary_key(urls, language), 'summary')

    # Analyses

    def cache_analysis(self, urls: List[str], questions: str, analysis: str, language: str,
                       output_settings: Optional[Dict[str, Any]] = None) -> None:
        self._store(self.analysis_key(urls, questions, language), {
            'urls': list(urls),
            'questions': questions,
            'analysis': analysis,
            'language': language,
            'output_settings': output_settings,
        })

    def get_cached_analysis(self, urls: List[str], questions: str, language: str) -> Optional[Dict[str, Any]]:
        return self._load(self.analysis_key(urls, questions, language), 'analysis')

    # Maintenance

    def _cache_files(self) -> List[str]:
        if not os.path.isdir(self.cache_dir):
            return []
        prefixes = tuple(CACHE_KEYS.values())
        return [f for f in os.listdir(self.cache_dir) if f.startswith(prefixes) and f.endswith('.json')]

    def clear(self) -> int:
        """Remove every cache entry. Returns the number of entries removed."""
        files = self._cache_files()
        for fname in files:
            self._remove(os.path.join(self.cache_dir, fname))
        logger.info(f"Cleared {len(files)} cached items")
        return len(files)

    def get_stats(self) -> Dict[str, Any]:
        """Count entries per kind and their total size on disk."""
        stats = {'video_data_count': 0, 'summary_count': 0, 'analysis_count': 0}
        total_size = 0

        for fname in self._cache_files():
            try:
                total_size += os.path.getsize(os.path.join(self.cache_dir, fname))
            except OSError as e:
                logger.warning(f"Could not check size of {fname}: {e}")
            for kind, prefix in CACHE_KEYS.items():
                if fname.startswith(prefix):
                    stats[f"{kind}_count"] += 1
                    break

        stats['total_size'] = format_file_size(total_size)
        return stats
