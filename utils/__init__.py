from .logger import setup_logger, get_client_logger

__all__ = ['setup_logger', 'get_client_logger']
