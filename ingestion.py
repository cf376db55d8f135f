import os
import re
import logging
from typing import List, Dict, Any, Optional
import requests
from youtube_transcript_api import YouTubeTranscriptApi, CouldNotRetrieveTranscript, NoTranscriptFound
from utils import clean_text

logger = logging.getLogger(__name__)

YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3/videos"

_VIDEO_ID_RE = re.compile(r"^.*((youtu.be\/)|(v\/)|(\/u\/\w\/)|(embed\/)|(watch\?))\??v?=?([^#&?]*).*")
_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def extract_video_id(url: str) -> Optional[str]:
    """Extract the 11-character video ID from a YouTube URL."""
    if not url:
        return None
    match = _VIDEO_ID_RE.match(url.strip())
    if match and match.group(7) and len(match.group(7)) == 11:
        return match.group(7)
    return None


def get_video_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def get_thumbnail_url(video_id: str) -> str:
    # Medium quality always exists, maxresdefault does not
    return f"https://img.youtube.com/vi/{video_id}/mqdefault.jpg"


def format_view_count(view_count: Optional[int]) -> str:
    """Format view count with K/M/B suffixes."""
    if not view_count:
        return "Unknown views"
    if view_count >= 1_000_000_000:
        return f"{view_count / 1_000_000_000:.1f}B views"
    if view_count >= 1_000_000:
        return f"{view_count / 1_000_000:.1f}M views"
    if view_count >= 1_000:
        return f"{view_count / 1_000:.1f}K views"
    return f"{view_count} views"


def format_duration(duration: str) -> str:
    """Convert an ISO 8601 duration (PT#H#M#S) to H:M:SS."""
    if not duration:
        return ""
    match = _DURATION_RE.search(duration)
    if not match:
        return ""
    hours = f"{match.group(1)}:" if match.group(1) else ""
    minutes = f"{match.group(2)}:" if match.group(2) else "0:"
    seconds = match.group(3).zfill(2) if match.group(3) else "00"
    return f"{hours}{minutes}{seconds}"


def format_offset(seconds: float) -> str:
    """Format a transcript offset in seconds as MM:SS."""
    total_seconds = int(seconds)
    return f"{total_seconds // 60:02d}:{total_seconds % 60:02d}"


def format_transcript(transcript: List[Dict[str, Any]], title: str, description: str) -> str:
    """
    Render transcript items as summarizer input text.

    Falls back to title and description when no transcript is available.
    """
    if not transcript:
        return (f"Title: {title}\n\nDescription: {description}\n\n"
                "(No transcript available for this video. Using video description as fallback.)")

    lines = [f"Title: {title}\n\nDescription: {description}\n\nTranscript:\n\n"]
    for item in transcript:
        lines.append(f"[{format_offset(item.get('offset', 0))}] {item.get('text', '')}\n")
    return "".join(lines)


def create_fallback_video_data(video_id: str, url: Optional[str] = None) -> Dict[str, Any]:
    """Placeholder payload used when video retrieval fails."""
    return {
        'video_id': video_id,
        'transcript': f"Unable to fetch transcript for video ID: {video_id}. Using fallback data.",
        'title': f"YouTube Video (ID: {video_id})",
        'channel_title': "Unknown Channel",
        'url': url or get_video_url(video_id),
        'fallback': True,
        'has_transcript': False,
    }


class VideoLoader:
    """
    Retrieves video metadata from the YouTube Data API and transcripts
    from YouTube captions, producing text ready for summarization.
    """

    def __init__(self, config: Dict[str, Any], cache=None):
        """
        Initialize VideoLoader with configuration.

        :param config: Configuration dictionary containing youtube settings
        :param cache: Optional CacheService used for video data
        """
        self.config = config or {}
        self.api_key_env = self.config.get('api_key_env', 'YOUTUBE_API_KEY')
        self.api_key = self.config.get('api_key') or os.environ.get(self.api_key_env)
        self.request_timeout = self.config.get('request_timeout', 10)
        self.default_language = self.config.get('default_language', 'en')
        self.cache = cache
        self.transcript_api = YouTubeTranscriptApi()

        if not self.api_key:
            logger.warning("YouTube API key is missing. Video metadata will use fallback data.")

        logger.info(f"VideoLoader initialized. Request timeout: {self.request_timeout}s")

    def fetch_video_info(self, video_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch snippet, content details and statistics for one video.

        :return: Metadata dict, or None when the API key is missing,
                 the request fails or the video does not exist
        """
        if not self.api_key:
            return None

        try:
            response = requests.get(
                YOUTUBE_API_URL,
                params={'part': 'snippet,contentDetails,statistics', 'id': video_id, 'key': self.api_key},
                timeout=self.request_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error fetching data for video {video_id}: {e}")
            return None

        if not response.ok:
            if response.status_code == 403:
                logger.error("YouTube API key may be invalid or quota exceeded")
            logger.error(f"YouTube API returned status {response.status_code} for video {video_id}")
            return None

        items = response.json().get('items') or []
        if not items:
            logger.warning(f"Video not found: {video_id}")
            return None

        video = items[0]
        snippet = video.get('snippet', {})
        thumbnails = snippet.get('thumbnails', {})
        thumbnail_url = next(
            (thumbnails[size]['url'] for size in ('maxres', 'high', 'medium', 'default') if size in thumbnails),
            get_thumbnail_url(video_id),
        )
        view_count = video.get('statistics', {}).get('viewCount')

        return {
            'video_id': video_id,
            'title': snippet.get('title', f"YouTube Video (ID: {video_id})"),
            'channel_title': snippet.get('channelTitle', "Unknown Channel"),
            'description': snippet.get('description') or "No description available.",
            'published_at': snippet.get('publishedAt', ""),
            'thumbnail_url': thumbnail_url,
            'duration': format_duration(video.get('contentDetails', {}).get('duration', "")),
            'view_count': format_view_count(int(view_count) if view_count else None),
        }

    def fetch_transcript(self, video_id: str, language: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Fetch caption items for a video, preferring the requested language.

        :return: List of {'text', 'offset', 'duration'} dicts (seconds);
                 empty when captions are disabled or unavailable
        """
        language = language or self.default_language
        try:
            transcript_list = self.transcript_api.list(video_id)
            try:
                transcript = transcript_list.find_transcript([language])
            except NoTranscriptFound:
                # Fall back to whatever track the video has
                transcript = next(iter(transcript_list), None)
            if transcript is None:
                return []
            fetched = transcript.fetch()
        except CouldNotRetrieveTranscript as e:
            logger.info(f"Transcript unavailable for video {video_id}: {e.__class__.__name__}")
            return []
        except Exception as e:
            logger.error(f"Error fetching transcript for video {video_id}: {e}")
            return []

        return [
            {'text': clean_text(snippet.text), 'offset': snippet.start, 'duration': snippet.duration}
            for snippet in fetched
        ]

    def list_transcript_languages(self, video_id: str) -> List[Dict[str, Any]]:
        """Languages with a caption track for this video."""
        try:
            return [
                {'code': t.language_code, 'name': t.language, 'is_generated': t.is_generated}
                for t in self.transcript_api.list(video_id)
            ]
        except CouldNotRetrieveTranscript:
            return []
        except Exception as e:
            logger.error(f"Error fetching transcript languages for video {video_id}: {e}")
            return []

    def load(self, video_id: str, url: Optional[str] = None, language: Optional[str] = None,
             skip_cache: bool = False) -> Dict[str, Any]:
        """
        Load title, channel and summarizable text for one video.

        Never raises: retrieval failures produce the fallback payload.

        Returns:
            {
                'video_id': str,
                'title': str,
                'channel_title': str,
                'url': str,
                'transcript': str,
                'fallback': bool,
                'has_transcript': bool,
                ...metadata
            }
        """
        url = url or get_video_url(video_id)
        language = language or self.default_language

        if self.cache is not None and not skip_cache:
            cached = self.cache.get_cached_video_data(video_id, language)
            if cached:
                logger.info(f"Using cached data for video {video_id}")
                return dict(cached, url=url, fallback=False)

        info = self.fetch_video_info(video_id)
        if info is None:
            return create_fallback_video_data(video_id, url)

        items = self.fetch_transcript(video_id, language)
        video_data = dict(
            info,
            transcript=format_transcript(items, info['title'], info['description']),
            has_transcript=bool(items),
        )

        if self.cache is not None:
            self.cache.cache_video_data(video_data, language)

        logger.info(f"Loaded video {video_id}: '{info['title']}' ({len(items)} transcript items)")
        return dict(video_data, url=url, fallback=False)
