"""
Synthesis of per-video results into the final deliverable document.

Related summaries are merged into one composite document; unrelated ones
are kept as individual sections. Per-video errors are listed at the end.
"""

from typing import List, Dict, Any, Optional, Tuple
import logging
from content_analyzer import ContentAnalyzer

logger = logging.getLogger(__name__)

LIMITED_DATA_NOTICE = "⚠️ *Limited data available: Could not fetch complete video information*"


class Synthesizer:
    """
    Combines per-video summaries and analyses into Markdown documents.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, analyzer: Optional[ContentAnalyzer] = None):
        """
        Initialize synthesizer with configuration.

        :param config: Analyzer configuration dictionary
        :param analyzer: Optional pre-built ContentAnalyzer
        """
        self.config = config or {}
        self.analyzer = analyzer or ContentAnalyzer(self.config)

    def _format_individual(self, result: Dict[str, Any]) -> str:
        header = f"## Summary for [{result['title']}]({result['url']})\n\n"
        if result.get('fallback'):
            return f"{header}{LIMITED_DATA_NOTICE}\n\n{result['summary']}\n\n"
        return f"{header}*Channel: {result['channel_title']}*\n\n{result['summary']}\n\n"

    def _format_errors(self, errors: List[Dict[str, Any]]) -> str:
        if not errors:
            return ""
        section = "\n## Errors\n\n"
        for error in errors:
            section += f"{error['message']}\n\n"
        return section

    def combine(self, results: List[Dict[str, Any]], errors: Optional[List[Dict[str, Any]]] = None,
                language: str = "en") -> Tuple[str, bool]:
        """
        Build the final summary document for a batch.

        :param results: Successful per-video results, in input order, with
                        title, channel_title, url, summary and fallback keys
        :param errors: Failed items with a 'message' key
        :param language: Language code of the summaries
        :return: (Markdown document, whether the videos were judged related)
        """
        errors = errors or []
        final_summary = ""
        are_videos_related = False

        if len(results) > 1:
            summaries = [r['summary'] for r in results]
            are_videos_related = self.analyzer.relatedness(summaries, language=language)
            logger.info(f"Videos related: {are_videos_related} ({len(results)} summaries)")

            if are_videos_related:
                final_summary = self.analyzer.merge(summaries, [r['title'] for r in results])
            else:
                for result in results:
                    final_summary += self._format_individual(result) + "---\n\n"
        elif len(results) == 1:
            final_summary = self._format_individual(results[0])

        final_summary += self._format_errors(errors)
        return final_summary, are_videos_related

    def format_analysis(self, videos: List[Dict[str, Any]], analysis: str,
                        errors: Optional[List[Dict[str, Any]]] = None) -> str:
        """Prefix an analysis with the list of analyzed videos and append errors."""
        sections = ["## Videos Analyzed\n\n"]
        for index, video in enumerate(videos, 1):
            sections.append(f"{index}. [{video['title']}]({video['url']}) - {video['channel_title']}\n")
        sections.append("\n---\n\n")
        sections.append(analysis)

        if errors:
            sections.append("\n\n## Errors\n\n")
            for error in errors:
                sections.append(f"- {error['message']}\n")

        return "".join(sections)
