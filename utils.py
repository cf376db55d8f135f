# Helper functions (logging, configs, etc.)
import os
import re
import yaml
import logging
from typing import List, Dict, Any, Optional, Tuple
import hashlib
import time
from datetime import datetime
from dotenv import load_dotenv

# Configure logging
def setup_logging(config: Dict[str, Any]) -> None:
    """Setup logging configuration based on config file."""
    log_config = config.get('logging', {})
    level = getattr(logging, log_config.get('level', 'INFO').upper())
    log_file = log_config.get('log_file', 'logs/summarizer.log')

    # Create logs directory if it doesn't exist
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logging.basicConfig(
        level=level,
        format=log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )

def load_config(path: str = "config.yml") -> dict:
    """Load configuration from YAML file with validation."""
    # API keys live in the environment, optionally via a .env file
    load_dotenv()

    if not os.path.exists(path):
        logging.warning(f"Config {path} not found, creating default config")
        create_default_config(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        # Setup logging based on config
        setup_logging(config)

        # Validate and set defaults
        config = validate_and_set_defaults(config)

        logging.info(f"Configuration loaded successfully from {path}")
        return config
    except Exception as e:
        logging.error(f"Error loading config: {e}")
        return get_default_config()

def create_default_config(path: str) -> None:
    """Create a default configuration file."""
    default_config = get_default_config()
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(default_config, f, default_flow_style=False, indent=2, allow_unicode=True)

def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        'youtube': {
            'api_key_env': 'YOUTUBE_API_KEY',
            'request_timeout': 10,
            'default_language': 'en',
            'max_workers': 4
        },
        'summarizer': {
            'provider': 'gemini',
            'api_key_env': 'GEMINI_API_KEY',
            'models': ['gemini-2.0-flash-lite', 'gemini-2.0-flash', 'gemini-2.5-flash'],
            'local_model': 'facebook/bart-large-cnn',
            'max_input_chars': 3000,
            'min_length': 30,
            'max_length': 200
        },
        'analyzer': {
            'relatedness_threshold': 0.15,
            'stop_words': {}
        },
        'cache': {
            'enabled': True,
            'cache_dir': 'cache',
            'video_data_ttl_hours': 168,
            'summary_ttl_hours': 24,
            'analysis_ttl_hours': 24
        },
        'export': {
            'output_dir': 'exports',
            'formats': ['markdown']
        },
        'output': {
            'format': 'markdown',
            'font_family': 'Times-Roman',
            'font_size': 12,
            'line_spacing': 1.5,
            'min_pages': 3,
            'max_pages': 6,
            'include_references': True,
            'formal_tone': True,
            'summary_style': 'academic'
        },
        'logging': {
            'level': 'INFO',
            'log_file': 'logs/summarizer.log'
        }
    }

def validate_and_set_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """Validate configuration and set missing defaults."""
    default_config = get_default_config()

    def merge_configs(base: Dict, override: Dict) -> Dict:
        """Recursively merge configuration dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    return merge_configs(default_config, config)

def clean_text(text: str) -> str:
    text = text.replace("\r\n", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()

def ensure_directory(path: str) -> None:
    """Ensure directory exists, create if it doesn't."""
    os.makedirs(path, exist_ok=True)

def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe file system usage."""
    # Remove or replace invalid characters
    filename = re.sub(r'[<>:"/\\|?*]', '_', filename)
    # Remove leading/trailing spaces and dots
    filename = filename.strip(' .')
    # Limit length
    if len(filename) > 200:
        filename = filename[:200]
    return filename

def format_timestamp(timestamp: Optional[datetime] = None) -> str:
    """Format timestamp for consistent use across the application."""
    if timestamp is None:
        timestamp = datetime.now()
    return timestamp.strftime("%Y%m%d_%H%M%S")

def validate_query(query: str, max_length: int = 5000) -> Tuple[bool, str]:
    """Validate user questions for security and length."""
    if not query or not query.strip():
        return False, "Please provide questions to analyze"

    if len(query) > max_length:
        return False, f"Questions too long (max {max_length} characters)"

    # Check for potentially malicious patterns
    malicious_patterns = [
        r'<script.*?>',
        r'javascript:',
        r'vbscript:',
        r'onload=',
        r'onerror='
    ]

    for pattern in malicious_patterns:
        if re.search(pattern, query, re.IGNORECASE):
            return False, "Questions contain potentially malicious content"

    return True, ""

def validate_urls(urls: List[str], max_urls: int = 20) -> Tuple[bool, str]:
    """Validate the list of video URLs submitted in one batch."""
    if not urls or not any(u and u.strip() for u in urls):
        return False, "Please provide at least one valid YouTube URL"

    if len(urls) > max_urls:
        return False, f"Too many URLs (max {max_urls} per batch)"

    return True, ""

def create_cache_key(*args) -> str:
    """Create a cache key from multiple arguments."""
    key_string = "_".join(str(arg) for arg in args)
    return hashlib.md5(key_string.encode()).hexdigest()

def measure_time(func):
    """Decorator to measure function execution time."""
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        end_time = time.time()
        logging.info(f"{func.__name__} executed in {end_time - start_time:.2f} seconds")
        return result
    return wrapper

def format_file_size(size_bytes: int) -> str:
    """Format file size in human readable format."""
    if size_bytes == 0:
        return "0B"
    size_names = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while size_bytes >= 1024 and i < len(size_names) - 1:
        size_bytes /= 1024.0
        i += 1
    return f"{size_bytes:.1f}{size_names[i]}"
