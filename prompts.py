"""
Prompt builders for video summarization and question analysis.

Output settings are plain dicts with the keys of DEFAULT_OUTPUT_SETTINGS.
Instruction text exists in English and Indonesian; other languages get
English formatting instructions plus a native-language answer request.
"""

from typing import List, Dict, Any, Optional

SUPPORTED_LANGUAGES = {
    "en": "English",
    "id": "Indonesian",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "ar": "Arabic",
    "hi": "Hindi",
    "pt": "Portuguese",
    "ru": "Russian",
}

DEFAULT_OUTPUT_SETTINGS = {
    "format": "markdown",
    "font_family": "Times-Roman",
    "font_size": 12,
    "line_spacing": 1.5,
    "min_pages": 3,
    "max_pages": 6,
    "include_references": True,
    "formal_tone": True,
    "summary_style": "academic",
    "language": "en",
}

LANGUAGE_INSTRUCTIONS = {
    "id": "Jawab pertanyaan-pertanyaan berikut berdasarkan video-video tersebut dalam bahasa Indonesia.",
    "es": "Responde las siguientes preguntas basándote en los videos en español.",
    "fr": "Répondez aux questions suivantes en vous basant sur les vidéos en français.",
    "de": "Beantworten Sie die folgenden Fragen basierend auf den Videos auf Deutsch.",
    "zh": "根据视频用中文回答以下问题。",
    "ja": "ビデオに基づいて、以下の質問に日本語で答えてください。",
    "ko": "비디오를 기반으로 다음 질문에 한국어로 답하십시오.",
    "ar": "أجب على الأسئلة التالية بناءً على مقاطع الفيديو باللغة العربية.",
    "hi": "वीडियो के आधार पर निम्नलिखित प्रश्नों का उत्तर हिंदी में दें।",
    "pt": "Responda às seguintes perguntas com base nos vídeos em português.",
    "ru": "Ответьте на следующие вопросы на основе видео на русском языке.",
    "en": "Answer the following questions based on the videos in English.",
}

FORMAT_INSTRUCTIONS = {
    "en": {
        "pdf": "Format the answer for a PDF document with {font_family} font, size {font_size}, and {line_spacing} line spacing.",
        "markdown": "Format the answer in Markdown with clear headings and subheadings.",
        "docx": "Format the answer for a Word document with {font_family} font, size {font_size}, and {line_spacing} line spacing.",
    },
    "id": {
        "pdf": "Format jawaban untuk dokumen PDF dengan font {font_family}, ukuran {font_size}, dan spasi {line_spacing}.",
        "markdown": "Format jawaban dalam Markdown dengan judul dan subjudul yang jelas.",
        "docx": "Format jawaban untuk dokumen Word dengan font {font_family}, ukuran {font_size}, dan spasi {line_spacing}.",
    },
}

STYLE_INSTRUCTIONS = {
    "en": {
        "tone": {
            "formal": "Use formal, academic language. ",
            "informal": "Use clear, conversational language. ",
        },
        "style": {
            "concise": "Provide concise answers that get straight to the point. ",
            "detailed": "Provide detailed and comprehensive answers. ",
            "academic": "Provide answers in an academic style, including in-depth analysis and appropriate technical terminology. ",
        },
    },
    "id": {
        "tone": {
            "formal": "Gunakan gaya bahasa formal dan akademis. ",
            "informal": "Gunakan bahasa yang jelas dan percakapan. ",
        },
        "style": {
            "concise": "Berikan jawaban yang ringkas dan langsung ke inti permasalahan. ",
            "detailed": "Berikan jawaban yang detail dan komprehensif. ",
            "academic": "Berikan jawaban dengan gaya akademis, termasuk analisis mendalam dan terminologi teknis yang sesuai. ",
        },
    },
}


def resolve_output_settings(settings: Optional[Dict[str, Any]] = None,
                            language: Optional[str] = None) -> Dict[str, Any]:
    """Fill missing output settings with defaults."""
    resolved = dict(DEFAULT_OUTPUT_SETTINGS)
    resolved.update({k: v for k, v in (settings or {}).items() if v is not None})
    if language:
        resolved["language"] = language
    return resolved


def get_language_name(language: str) -> str:
    return SUPPORTED_LANGUAGES.get(language, SUPPORTED_LANGUAGES["en"])


def get_language_instructions(language: str) -> str:
    return LANGUAGE_INSTRUCTIONS.get(language, LANGUAGE_INSTRUCTIONS["en"])


def get_format_instructions(settings: Dict[str, Any], language: str) -> str:
    lang_map = FORMAT_INSTRUCTIONS.get(language, FORMAT_INSTRUCTIONS["en"])
    template = lang_map.get(settings["format"], lang_map["markdown"])
    return template.format(**settings)


def get_style_instructions(settings: Dict[str, Any], language: str) -> str:
    lang_map = STYLE_INSTRUCTIONS.get(language, STYLE_INSTRUCTIONS["en"])
    english = STYLE_INSTRUCTIONS["en"]

    tone = "formal" if settings["formal_tone"] else "informal"
    instructions = lang_map["tone"].get(tone) or english["tone"][tone]
    instructions += lang_map["style"].get(settings["summary_style"]) or english["style"].get(settings["summary_style"], "")
    return instructions


def get_references_instructions(settings: Dict[str, Any], language: str) -> str:
    if not settings["include_references"]:
        return ""
    if language == "id":
        return "Sertakan daftar referensi di akhir dokumen, termasuk video yang dianalisis dan sumber tambahan jika ada."
    return "Include a list of references at the end of the document, including the analyzed videos and any additional sources if used."


def get_page_length_instructions(settings: Dict[str, Any], language: str) -> str:
    if language == "id":
        return (f"Pastikan jawaban memiliki panjang yang sesuai untuk dokumen {settings['min_pages']}-{settings['max_pages']} "
                f"halaman dengan font {settings['font_family']}, ukuran {settings['font_size']}, dan spasi {settings['line_spacing']}.")
    return (f"Ensure the answer is appropriate in length for a {settings['min_pages']}-{settings['max_pages']} page document "
            f"with {settings['font_family']} font, size {settings['font_size']}, and {settings['line_spacing']} line spacing.")


def build_summary_prompt(text: str, title: str, language: str = "en",
                         settings: Optional[Dict[str, Any]] = None) -> str:
    """
    Prompt asking for an overview, 3-5 bullets and a conclusion.

    Tone and summary style come from the output settings; the bullet
    layout is fixed so related summaries can be merged.
    """
    settings = resolve_output_settings(settings, language)
    return f"""
Please summarize the following YouTube video content in a clear, concise manner.
The video title is: "{title}"
Write the summary in {get_language_name(language)}.
{get_style_instructions(settings, language)}

Format the summary in Markdown with:

1. A brief overview of the main topic (1-2 sentences)
2. 3-5 key points with bullet points, each starting with "* "
3. A short conclusion or main takeaway

If the content seems incomplete or is just metadata, please note that in your summary
and do your best with the available information.

Here is the content:

{text}
"""


def format_video_blocks(videos: List[Dict[str, Any]]) -> str:
    blocks = []
    for index, video in enumerate(videos, 1):
        blocks.append(
            f'VIDEO {index}: "{video["title"]}" by {video["channel_title"]}\n'
            f'URL: {video["url"]}\n'
            f'TRANSCRIPT:\n{video["transcript"]}\n\n'
            '-------------------\n'
        )
    return "\n".join(blocks)


def build_analysis_prompt(videos: List[Dict[str, Any]], questions: str, language: str,
                          settings: Dict[str, Any], feedback: Optional[str] = None) -> str:
    """Prompt answering user questions across all videos of a batch."""
    feedback_instructions = (
        f"USER FEEDBACK: {feedback}\nPlease incorporate this feedback into your response." if feedback else ""
    )
    return f"""
{get_language_instructions(language)}

{get_format_instructions(settings, language)}

{get_style_instructions(settings, language)}

{get_page_length_instructions(settings, language)}

{get_references_instructions(settings, language)}

{feedback_instructions}

VIDEO CONTENT:
{format_video_blocks(videos)}

QUESTIONS:
{questions}

Format your answers in Markdown, with clear headings for each question. Be thorough but concise.
"""
