# -*- coding: utf-8 -*-
"""
Configuration module - loads parser and layout settings from the environment
"""
import os
from dotenv import load_dotenv

# Load .env if present
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration"""

    DEBUG = False
    TESTING = False

    # Logging
    LOG_LEVEL = os.getenv('DIAGRAM_LOG_LEVEL', 'WARNING')

    # Initial coordinates assigned by the parsers
    AUTO_LAYOUT = _env_flag('DIAGRAM_AUTO_LAYOUT', 'true')
    CELL_WIDTH = float(os.getenv('DIAGRAM_CELL_WIDTH', '250'))
    CELL_HEIGHT = float(os.getenv('DIAGRAM_CELL_HEIGHT', '300'))
    LAYOUT_ORIGIN = float(os.getenv('DIAGRAM_LAYOUT_ORIGIN', '50'))
    CLASS_OFFSET = float(os.getenv('DIAGRAM_CLASS_OFFSET', '100'))
    CLASS_STEP = float(os.getenv('DIAGRAM_CLASS_STEP', '50'))

    @classmethod
    def get_layout_config(cls):
        """Return the grid layout settings as a dictionary"""
        return {
            'cell_width': cls.CELL_WIDTH,
            'cell_height': cls.CELL_HEIGHT,
            'start_x': cls.LAYOUT_ORIGIN,
            'start_y': cls.LAYOUT_ORIGIN,
        }


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    LOG_LEVEL = os.getenv('DIAGRAM_LOG_LEVEL', 'INFO')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False

    @classmethod
    def validate(cls):
        """Reject layout settings the rendering side cannot use"""
        invalid = []
        for name in ('CELL_WIDTH', 'CELL_HEIGHT', 'CLASS_STEP'):
            if getattr(cls, name) <= 0:
                invalid.append(name)

        if invalid:
            raise ValueError(f"Invalid layout configuration: {', '.join(invalid)}")


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    AUTO_LAYOUT = _env_flag('DIAGRAM_AUTO_LAYOUT', 'false')


def get_config():
    """Pick the configuration class named by DIAGRAM_ENV"""
    env = os.getenv('DIAGRAM_ENV', 'development')

    config_map = {
        'development': DevelopmentConfig,
        'production': ProductionConfig,
        'testing': TestingConfig
    }

    return config_map.get(env, DevelopmentConfig)


# Convenience access
config = get_config()
