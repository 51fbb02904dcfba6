"""Logging configuration for the Nerdland episode archive"""

import logging

from ..config import LOG_FILE


def setup_logging(log_file: str = LOG_FILE) -> logging.Logger:
    """Set up logging configuration"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler()
        ]
    )
    
    # Suppress verbose HTTP client logging
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("chardet").setLevel(logging.WARNING)
    
    return logging.getLogger("nerdland_episodes")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance"""
    return logging.getLogger(name)
