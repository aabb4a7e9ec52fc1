import logging
import sys

# Centralized logger name
LOGGER_NAME = "ShaderNodes"

def get_logger() -> logging.Logger:
    """Get the standard logger for Shader Nodes."""
    return logging.getLogger(LOGGER_NAME)

def setup_logger(level=logging.INFO):
    """
    Configure the Shader Nodes logger.
    
    Module loggers live under the ``shader_nodes`` package namespace, so
    they are routed to this handler as well.
    
    Args:
        level: Logging level (default: INFO)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    
    # Remove existing handlers to prevent duplicates
    if logger.handlers:
        logger.handlers.clear()
        
    # Create console handler
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)
    
    # Format: [ShaderNodes] [Level] Message
    formatter = logging.Formatter(f'[{LOGGER_NAME}] [%(levelname)s] %(message)s')
    ch.setFormatter(formatter)
    
    logger.addHandler(ch)
    
    package_logger = logging.getLogger("shader_nodes")
    package_logger.setLevel(level)
    package_logger.handlers = [ch]
    package_logger.propagate = False
    
    return logger
