"""Configuration validation for tree mirror."""

from typing import Dict, Any

from ..core.path_cursor import OVERFLOW_POLICIES


class ConfigValidator:
    """Validates tree mirror configuration."""
    
    KNOWN_SECTIONS = ['paths', 'mirror', 'logging']
    LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    
    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration data.
        
        Args:
            config: Configuration dictionary to validate.
            
        Raises:
            ValueError: If configuration is invalid.
        """
        self._validate_structure(config)
        
        if config.get('paths'):
            self._validate_paths_config(config['paths'])
        if config.get('mirror'):
            self._validate_mirror_config(config['mirror'])
        if config.get('logging'):
            self._validate_logging_config(config['logging'])
    
    def _validate_structure(self, config: Dict[str, Any]) -> None:
        """Validate basic configuration structure.
        
        Args:
            config: Configuration dictionary.
            
        Raises:
            ValueError: If the config or one of its sections is not a mapping.
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a mapping")
        
        for section in self.KNOWN_SECTIONS:
            value = config.get(section)
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"Configuration section '{section}' must be a dictionary")
    
    def _validate_paths_config(self, paths: Dict[str, Any]) -> None:
        for key in ['source', 'destination', 'default_paths_file']:
            value = paths.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"paths.{key} must be a string")
            if value == '':
                raise ValueError(f"paths.{key} cannot be empty")
    
    def _validate_mirror_config(self, mirror: Dict[str, Any]) -> None:
        """Validate mirror walk settings.
        
        Args:
            mirror: Mirror configuration dictionary.
            
        Raises:
            ValueError: If a value has the wrong type or range.
        """
        if 'threshold_seconds' in mirror:
            self._require_number(mirror, 'threshold_seconds', minimum=0)
        if 'chunk_size_kb' in mirror:
            self._require_int(mirror, 'chunk_size_kb', minimum=1)
        if 'max_path_length' in mirror:
            self._require_int(mirror, 'max_path_length', minimum=1)
        if 'workers' in mirror:
            self._require_int(mirror, 'workers', minimum=1)
        
        overflow = mirror.get('path_overflow', 'truncate')
        if overflow not in OVERFLOW_POLICIES:
            raise ValueError(f"mirror.path_overflow must be one of {list(OVERFLOW_POLICIES)}: {overflow}")
    
    def _validate_logging_config(self, logging_config: Dict[str, Any]) -> None:
        level = logging_config.get('level', 'INFO')
        if not isinstance(level, str) or level.upper() not in self.LOG_LEVELS:
            raise ValueError(f"Invalid log level: {level}")
        
        log_dir = logging_config.get('log_dir', 'logs')
        if not isinstance(log_dir, str) or not log_dir:
            raise ValueError("logging.log_dir must be a non-empty string")
    
    def _require_number(self, section: Dict[str, Any], key: str, minimum: float) -> None:
        value = section[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < minimum:
            raise ValueError(f"mirror.{key} must be a number >= {minimum}: {value}")
    
    def _require_int(self, section: Dict[str, Any], key: str, minimum: int) -> None:
        value = section[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
            raise ValueError(f"mirror.{key} must be an integer >= {minimum}: {value}")
