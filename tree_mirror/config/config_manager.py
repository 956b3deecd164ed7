"""Configuration management for the tree mirror."""

import logging
import os
import yaml
from typing import Dict, Any, Optional, Tuple
from .config_validator import ConfigValidator


class ConfigManager:
    """Manages configuration loading and validation for mirror runs."""
    
    DEFAULT_CONFIG_LOCATIONS = [
        "config.yaml",
        "config.yml",
        os.path.expanduser("~/.tree-mirror/config.yaml"),
        os.path.expanduser("~/.tree-mirror/config.yml"),
        "/etc/tree-mirror/config.yaml",
        "/etc/tree-mirror/config.yml"
    ]
    
    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.
        
        Args:
            config_path: Optional path to config file. If not provided,
                        will search in default locations.
        """
        self.config_path = config_path
        self.config_file: Optional[str] = None
        self.config_data: Dict[str, Any] = {}
        self.validator = ConfigValidator()
        self.logger = logging.getLogger(__name__)
        
    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file.
        
        A missing config file is only an error when a path was given
        explicitly; otherwise the defaults are used on their own.
        
        Returns:
            Dictionary containing configuration data.
            
        Raises:
            FileNotFoundError: If an explicit config file cannot be found.
            ValueError: If config file is invalid.
        """
        self.config_file = self._find_config_file()
        self.config_data = {}
        
        if self.config_file:
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    self.config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in config file {self.config_file}: {e}")
            except Exception as e:
                raise ValueError(f"Error reading config file {self.config_file}: {e}")
        else:
            self.logger.debug("No configuration file found, using defaults")
        
        # Validate configuration
        self.validator.validate(self.config_data)
        
        # Set defaults
        self._set_defaults()
        
        return self.config_data
    
    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in default locations.
        
        Returns:
            Path to configuration file, or None if none exists.
            
        Raises:
            FileNotFoundError: If the explicit config file does not exist.
        """
        if self.config_path:
            if os.path.exists(self.config_path):
                return self.config_path
            else:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")
        
        for location in self.DEFAULT_CONFIG_LOCATIONS:
            if os.path.exists(location):
                return location
        
        return None
    
    def _set_defaults(self):
        """Set default values for optional configuration parameters."""
        defaults = {
            'paths': {
                'source': None,
                'destination': None,
                'default_paths_file': 'default.txt'
            },
            'mirror': {
                'threshold_seconds': 10,
                'chunk_size_kb': 1024,
                'max_path_length': 4084,
                'path_overflow': 'truncate',
                'workers': 1
            },
            'logging': {
                'level': 'INFO',
                'log_dir': 'logs'
            }
        }
        
        # Merge defaults with existing config
        for section, section_defaults in defaults.items():
            if not self.config_data.get(section):
                self.config_data[section] = {}
            for key, value in section_defaults.items():
                if key not in self.config_data[section]:
                    self.config_data[section][key] = value
    
    def get_paths_config(self) -> Dict[str, Any]:
        """Get source/destination path configuration."""
        return self.config_data.get('paths', {})
    
    def get_mirror_config(self) -> Dict[str, Any]:
        """Get mirror walk configuration."""
        return self.config_data.get('mirror', {})
    
    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.config_data.get('logging', {})
    
    def load_default_paths(self) -> Optional[Tuple[str, str]]:
        """Read the legacy default paths file.
        
        The file holds a single ``source,destination`` line. The pair is
        only returned when both directories exist.
        
        Returns:
            (source, destination) or None.
        """
        paths_file = self.get_paths_config().get('default_paths_file')
        if not paths_file or not os.path.isfile(paths_file):
            return None
        
        try:
            with open(paths_file, 'r', encoding='utf-8') as f:
                line = f.readline()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning(f"Could not read default paths file {paths_file}: {e}")
            return None
        
        source, sep, destination = line.rstrip('\r\n').partition(',')
        if not sep:
            self.logger.warning(f"Default paths file {paths_file} has no 'source,destination' line")
            return None
        
        source = source.strip()
        destination = destination.strip()
        if source and destination and os.path.isdir(source) and os.path.isdir(destination):
            return source, destination
        
        self.logger.debug(f"Default paths in {paths_file} do not both exist")
        return None
